"""JSON envelope helpers: ``{"status": "success", "data": ...}`` / ``{"status": "error", ...}``."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def success(data: Any = None) -> dict:
    return {"status": "success", "data": jsonable_encoder(data)}


def error_response(
    status_code: int,
    message: str,
    errors: Mapping[str, Sequence[str]] | None = None,
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    body: dict[str, Any] = {"status": "error", "message": message}
    if errors:
        body["errors"] = {field: list(msgs) for field, msgs in errors.items()}
    return JSONResponse(body, status_code=status_code, headers=dict(headers) if headers else None)
