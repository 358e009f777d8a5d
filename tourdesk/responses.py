"""Uniform JSON envelopes for every API response"""

from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def success_response(message: str = "Success", data: Any = None, status_code: int = 200) -> JSONResponse:
    content = {
        "success": True,
        "statusCode": status_code,
        "message": message,
    }
    if data is not None:
        content["data"] = jsonable_encoder(data, by_alias=True)
    return JSONResponse(status_code=status_code, content=content)


def error_response(
    status_code: int = 500,
    message: str = "Internal Server Error",
    errors: Optional[list[dict[str, Any]]] = None,
) -> JSONResponse:
    content = {
        "success": False,
        "statusCode": status_code,
        "message": message,
    }
    if errors:
        content["errors"] = errors
    return JSONResponse(status_code=status_code, content=content)
