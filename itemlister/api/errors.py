from collections.abc import Sequence
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from itemlister.export.exceptions import ExportError, SheetsAccessDeniedError
from itemlister.logging.logger import Log
from itemlister.processor.exceptions import ProcessingStepError
from itemlister.records.exceptions import RecordNotFoundError


def register_error_handlers(app: FastAPI, *, production: bool) -> None:
    """Map domain exceptions to JSON bodies `{error, message, step?, details?}`."""

    @app.exception_handler(ProcessingStepError)
    def handle_step_error(request: Request, exc: ProcessingStepError) -> JSONResponse:
        body: dict[str, object] = {"error": exc.error, "message": exc.message, "step": exc.step}
        if not production and exc.details:
            body["details"] = exc.details
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(RequestValidationError)
    def handle_invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request", "message": _describe_validation_errors(exc.errors())},
        )

    @app.exception_handler(RecordNotFoundError)
    def handle_not_found(request: Request, exc: RecordNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"error": f"{exc.kind.capitalize()} not found"})

    @app.exception_handler(ExportError)
    def handle_export_error(request: Request, exc: ExportError) -> JSONResponse:
        Log.error(f"Export failed ({exc.status_code}): {exc}")
        body: dict[str, object] = {"error": str(exc)}
        if isinstance(exc, SheetsAccessDeniedError) and exc.service_account_email:
            body["serviceAccountEmail"] = exc.service_account_email
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(Exception)
    def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        Log.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "message": "Something went wrong" if production else str(exc),
            },
        )


def _describe_validation_errors(errors: Sequence[Any]) -> str:
    problems = []
    for error in errors:
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        problems.append(f"{location or 'body'}: {error.get('msg', 'invalid value')}")
    return "; ".join(problems)
