"""
Authorization policy: one table mapping (action, role) -> allowed.

"canonical" is deny-by-default: only the pairs listed are allowed.
"legacy" reproduces the deny-lists the first version of the API shipped with
for announcements (everything allowed except the listed pairs), kept selectable
until the product owner confirms the canonical matrix. Rundown, role and user
actions always follow the canonical table. Its announcement update rule
depended on whether a new banner was sent, hence the separate
ANNOUNCEMENT_UPDATE_BANNER action.
"""
from nurul_iman.errors import ForbiddenError
from nurul_iman.models.role import RoleName

ANNOUNCEMENT_ADD = "announcement:add"
ANNOUNCEMENT_UPDATE = "announcement:update"
ANNOUNCEMENT_UPDATE_BANNER = "announcement:update_banner"
ANNOUNCEMENT_DELETE = "announcement:delete"
RUNDOWN_ADD = "rundown:add"
RUNDOWN_UPDATE = "rundown:update"
RUNDOWN_DELETE = "rundown:delete"
ROLE_READ = "role:read"
ROLE_MANAGE = "role:manage"
USER_MANAGE = "user:manage"

_STAFF = (RoleName.SUPER_ADMIN, RoleName.ADMIN)

CANONICAL_RULES: dict[tuple[str, str], bool] = {
    **{(ANNOUNCEMENT_ADD, r): True for r in _STAFF},
    **{(ANNOUNCEMENT_UPDATE, r): True for r in _STAFF},
    **{(ANNOUNCEMENT_UPDATE_BANNER, r): True for r in _STAFF},
    **{(ANNOUNCEMENT_DELETE, r): True for r in _STAFF},
    **{(RUNDOWN_ADD, r): True for r in _STAFF},
    **{(RUNDOWN_UPDATE, r): True for r in (*_STAFF, RoleName.USTADZ)},
    **{(RUNDOWN_DELETE, r): True for r in _STAFF},
    **{(ROLE_READ, r): True for r in _STAFF},
    **{(ROLE_MANAGE, r): True for r in _STAFF},
    **{(USER_MANAGE, r): True for r in _STAFF},
}

LEGACY_RULES: dict[tuple[str, str], bool] = {
    (ANNOUNCEMENT_ADD, RoleName.USER): False,
    (ANNOUNCEMENT_ADD, RoleName.USTADZ): False,
    (ANNOUNCEMENT_UPDATE_BANNER, RoleName.ADMIN): False,
    (ANNOUNCEMENT_UPDATE, RoleName.USER): False,
    (ANNOUNCEMENT_DELETE, RoleName.ADMIN): False,
}

DENIED_MESSAGES = {
    ANNOUNCEMENT_ADD: "You do not have access to add announcements",
    ANNOUNCEMENT_UPDATE: "You do not have access to update announcements",
    ANNOUNCEMENT_UPDATE_BANNER: "You do not have access to update announcements",
    ANNOUNCEMENT_DELETE: "You do not have access to delete announcements",
    RUNDOWN_ADD: "You do not have access to add study rundowns",
    RUNDOWN_UPDATE: "You do not have access to update study rundowns",
    RUNDOWN_DELETE: "You do not have access to delete study rundowns",
    ROLE_READ: "You do not have access to roles",
    ROLE_MANAGE: "You do not have access to manage roles",
    USER_MANAGE: "You do not have access to manage users",
}


ANNOUNCEMENT_ACTIONS = frozenset(
    {ANNOUNCEMENT_ADD, ANNOUNCEMENT_UPDATE, ANNOUNCEMENT_UPDATE_BANNER, ANNOUNCEMENT_DELETE}
)


class AuthorizationPolicy:
    """
    `rules` decide the actions in `scope` (all actions when scope is None),
    with `default` for unlisted roles. Anything outside the scope is decided
    by `fallback`.
    """

    def __init__(
        self,
        name: str,
        rules: dict[tuple[str, str], bool],
        default: bool,
        scope: frozenset[str] | None = None,
        fallback: "AuthorizationPolicy | None" = None,
    ):
        self.name = name
        self.rules = rules
        self.default = default
        self.scope = scope
        self.fallback = fallback

    def allows(self, action: str, role_name: str) -> bool:
        if self.scope is not None and action not in self.scope:
            return self.fallback is not None and self.fallback.allows(action, role_name)
        return self.rules.get((action, role_name), self.default)

    def check(self, action: str, role_name: str) -> None:
        if not self.allows(action, role_name):
            raise ForbiddenError(DENIED_MESSAGES.get(action, "You do not have access"))


def build_policy(name: str) -> AuthorizationPolicy:
    canonical = AuthorizationPolicy("canonical", CANONICAL_RULES, default=False)
    if name == "canonical":
        return canonical
    if name == "legacy":
        return AuthorizationPolicy(
            "legacy",
            LEGACY_RULES,
            default=True,
            scope=ANNOUNCEMENT_ACTIONS,
            fallback=canonical,
        )
    raise ValueError(f"Unknown authorization_policy: {name!r}")
