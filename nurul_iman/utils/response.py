"""JSON envelope shared by every endpoint: {message, code, status, data}."""
from typing import Any

from fastapi.encoders import jsonable_encoder


def api_response(message: str, code: int, status: str, data: Any = None) -> dict:
    return {
        "message": message,
        "code": code,
        "status": status,
        "data": jsonable_encoder(data),
    }


def api_response_list(
    message: str,
    code: int,
    status: str,
    page: int,
    per_page: int,
    total: int,
    data: Any,
) -> dict:
    body = api_response(message, code, status, data)
    body.update({"page": page, "per_page": per_page, "total": total})
    return body


def format_validation_errors(errors: list[dict]) -> list[str]:
    """RequestValidationError.errors() -> ["title: Field required", ...]"""
    out = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc) or "request"
        out.append(f"{field}: {err.get('msg', 'invalid')}")
    return out
