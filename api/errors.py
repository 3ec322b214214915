"""API error responses"""
import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from api.schemas import ValidationProblem
from application.validation import ErrorMap, format_errors

log = logging.getLogger(__name__)


def validation_problem(errors: ErrorMap) -> JSONResponse:
    """400 problem-details response with a field-error map"""
    body = ValidationProblem(errors=errors)
    return JSONResponse(status_code=400, content=jsonable_encoder(body))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = format_errors(exc.errors())
    log.info("Validation failed on %s %s: %s", request.method, request.url.path, sorted(errors))
    return validation_problem(errors)


def init_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, request_validation_handler)
