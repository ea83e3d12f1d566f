"""RFC 7807 *Problem Details* responses for admin-client failures."""
from __future__ import annotations

from typing import Optional
from uuid import uuid4

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from kafka.errors import KafkaError
from pydantic import BaseModel, Field, ValidationError

from kafka_admin.core.exceptions import (
    ConfigurationError,
    NoAvailableBrokersError,
    ResponseError,
    TopicMissingError,
)


class ProblemDetail(BaseModel):
    """Body of every error response (`application/problem+json`).

    ``detail`` is the exception text; for a ``ResponseError`` it names the
    resource and the Kafka error. ``instance`` is a fresh URN per failure.
    """

    type: str = Field("about:blank", examples=["/topic-missing"])
    title: str
    status: int = Field(..., ge=400, le=599)
    detail: Optional[str] = None
    instance: str = Field(default_factory=lambda: f"urn:uuid:{uuid4()}")


def _problem(status_code: int, title: str, exc: Exception) -> JSONResponse:
    problem = ProblemDetail(status=status_code, title=title, detail=str(exc))
    return JSONResponse(
        content=problem.model_dump(mode="json"),
        status_code=status_code,
        media_type="application/problem+json",
    )


def install_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(TopicMissingError)
    async def topic_missing_handler(_: Request, exc: TopicMissingError):
        return _problem(status.HTTP_404_NOT_FOUND, "Not Found", exc)

    # unloadable connection settings are server-side
    @app.exception_handler(ConfigurationError)
    @app.exception_handler(ValidationError)
    async def misconfigured_handler(_: Request, exc: ValueError):
        return _problem(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server Misconfigured", exc)

    # ACLValidationError is a ValueError
    @app.exception_handler(ValueError)
    async def value_error_handler(_: Request, exc: ValueError):
        return _problem(status.HTTP_400_BAD_REQUEST, "Bad Request", exc)

    @app.exception_handler(ResponseError)
    async def response_error_handler(_: Request, exc: ResponseError):
        return _problem(status.HTTP_409_CONFLICT, exc.error.message or "Conflict", exc)

    @app.exception_handler(NoAvailableBrokersError)
    async def no_brokers_handler(_: Request, exc: NoAvailableBrokersError):
        return _problem(status.HTTP_503_SERVICE_UNAVAILABLE, "Service Unavailable", exc)

    @app.exception_handler(KafkaError)
    async def kafka_error_handler(_: Request, exc: KafkaError):
        return _problem(status.HTTP_503_SERVICE_UNAVAILABLE, "Service Unavailable", exc)

    # Catch-all
    @app.exception_handler(Exception)
    async def unhandled(_: Request, exc: Exception):
        return _problem(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error", exc)
