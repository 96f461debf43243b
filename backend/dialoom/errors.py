# backend/dialoom/errors.py
"""
Problem-details error envelope.

Every error leaves the API as ``{type, title, status, detail, instance}``
plus the domain ``code`` and ``errors`` when the raising layer supplied them.
"""

import logging
from typing import Any, Dict, Optional, Tuple

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.constants import INTERNAL_ERROR_MESSAGE

logger = logging.getLogger(__name__)

PROBLEM_MEDIA_TYPE = "application/problem+json"


def _title_from_status(status_code: int) -> str:
    mapping = {
        400: "Bad Request",
        401: "Unauthorized",
        403: "Forbidden",
        404: "Not Found",
        409: "Conflict",
        422: "Unprocessable Entity",
        500: "Internal Server Error",
    }
    return mapping.get(status_code, "Error")


def _problem(
    *,
    status: int,
    title: Optional[str] = None,
    detail: Optional[str] = None,
    instance: Optional[str] = None,
    type_: str = "about:blank",
    code: Optional[str] = None,
    errors: Optional[Any] = None,
) -> Dict[str, Any]:
    problem: Dict[str, Any] = {
        "type": type_,
        "title": title or _title_from_status(status),
        "status": status,
        "detail": detail or "",
        "instance": instance or "",
    }
    if code:
        problem["code"] = code
    if errors:
        problem["errors"] = errors
    return problem


def _parse_detail(detail: Any) -> Tuple[Optional[str], Optional[str], Optional[Any]]:
    if isinstance(detail, dict):
        code = detail.get("code") if isinstance(detail.get("code"), str) else None
        message = detail.get("message") or detail.get("detail")
        detail_text = message if isinstance(message, str) else None
        errors = detail.get("details") or detail.get("errors")
        return detail_text, code, errors
    if isinstance(detail, str):
        return detail, None, None
    if detail is None:
        return None, None, None
    return str(detail), None, None


def register_error_handlers(app: FastAPI) -> None:
    # fastapi.HTTPException subclasses Starlette's, so one handler covers both
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        detail_text, code, errors = _parse_detail(exc.detail)
        problem = _problem(
            status=exc.status_code,
            detail=detail_text,
            instance=request.url.path,
            code=code,
            errors=jsonable_encoder(errors) if errors is not None else None,
        )
        return JSONResponse(
            problem,
            status_code=exc.status_code,
            media_type=PROBLEM_MEDIA_TYPE,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        problem = _problem(
            status=400,
            detail="Request validation failed",
            instance=request.url.path,
            code="validation_error",
            errors=jsonable_encoder(exc.errors()),
        )
        return JSONResponse(problem, status_code=400, media_type=PROBLEM_MEDIA_TYPE)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        problem = _problem(
            status=500,
            detail=INTERNAL_ERROR_MESSAGE,
            instance=request.url.path,
            code="internal_server_error",
        )
        return JSONResponse(problem, status_code=500, media_type=PROBLEM_MEDIA_TYPE)
