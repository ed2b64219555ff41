import re

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(text: str, max_length: int = 200) -> str:
    """'Friday Prayer!' -> 'friday-prayer'. Returns '' when nothing usable is left."""
    s = _NON_ALNUM.sub("-", (text or "").lower()).strip("-")
    return s[:max_length].rstrip("-")
