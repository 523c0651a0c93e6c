"""The JSON envelope every route answers with.

    {"status": "success", "data": ..., "timestamp": ..., "metadata"?: {...}}
    {"status": "error", "error": {"code", "message", "details"?}, "timestamp": ...}
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from database.exceptions import ServiceError
from database.pagination import Page
from database.result import Result
from models.casing import keys_to_camel


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _encode(data: Any) -> Any:
    """Records serialize through their camelCase aliases; plain dicts are converted."""
    if isinstance(data, BaseModel):
        return jsonable_encoder(data, by_alias=True)
    if isinstance(data, (list, tuple)):
        return [_encode(item) for item in data]
    if isinstance(data, dict):
        return keys_to_camel({k: _encode(v) for k, v in data.items()})
    return jsonable_encoder(data)


def success(
    data: Any = None,
    status_code: int = 200,
    metadata: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    body: Dict[str, Any] = {
        "status": "success",
        "data": _encode(data),
        "timestamp": _timestamp(),
    }
    if metadata is not None:
        body["metadata"] = metadata
    return JSONResponse(status_code=status_code, content=body)


def error_body(code: str, message: str, details: Any = None) -> Dict[str, Any]:
    error: Dict[str, Any] = {"code": code, "message": message}
    if details is not None:
        error["details"] = jsonable_encoder(details)
    return {"status": "error", "error": error, "timestamp": _timestamp()}


def failure(exc: ServiceError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=error_body(exc.code, exc.message, exc.details),
    )


def respond(result: Result, status_code: int = 200) -> JSONResponse:
    """Encode a Record Access Layer result. Pages carry their metadata."""
    if not result.ok:
        return failure(result.error)
    if isinstance(result.data, Page):
        return success(result.data.items, status_code, metadata=result.data.metadata())
    return success(result.data, status_code)
