"""REST API for registration and check-in, shared with the Streamlit app's store."""
import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.schemas import (
    AttendeeEnvelope,
    AttendeeListEnvelope,
    AttendeeOut,
    CheckInRequest,
    ErrorBody,
    RegisterRequest,
)
from src.config import get_settings
from src.models.attendee import CheckInStatus
from src.models.check_in import CheckInOutcome, CheckInSource
from src.services import ticket_codec
from src.services.check_in_service import process_check_in
from src.services.registry import Registry, build_registry
from src.utils.exceptions import StorageError, ValidationError
from src.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def get_registry(request: Request) -> Registry:
    """Dependency returning the Registry attached to the running app."""
    return request.app.state.registry


def create_app(registry: Optional[Registry] = None) -> FastAPI:
    """
    Build the API application.

    Args:
        registry: Registry to serve; built from settings at startup when None
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "registry", None) is None:
            settings = get_settings()
            setup_logging(settings.log_level)
            app.state.registry = build_registry(settings)
        logger.info("Gate API started")
        yield
        logger.info("Gate API shutting down")

    app = FastAPI(
        title="Event Gate API",
        description="Attendee registration and gate check-in",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.registry = registry

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error("Storage unavailable while serving %s: %s", request.url.path, exc)
        return JSONResponse(status_code=503, content={"error": "Attendee store unavailable"})

    @app.get("/api/health", tags=["Health"])
    def health():
        return {"status": "ok"}

    @app.post("/api/register", status_code=201, response_model=AttendeeEnvelope, tags=["Registration"])
    def register(body: RegisterRequest, registry: Registry = Depends(get_registry)):
        try:
            attendee = registry.register(body.fullName, body.email, body.role, body.ticketType)
        except ValidationError as e:
            raise HTTPException(status_code=422, detail=str(e))
        return AttendeeEnvelope(data=AttendeeOut.from_attendee(attendee))

    @app.get("/api/attendees", response_model=AttendeeListEnvelope, tags=["Attendees"])
    def list_attendees(status: Optional[CheckInStatus] = None, registry: Registry = Depends(get_registry)):
        attendees = registry.list(status)
        return AttendeeListEnvelope(data=[AttendeeOut.from_attendee(a) for a in attendees])

    @app.get("/api/attendees/{attendee_id}/qr", tags=["Attendees"])
    def attendee_qr(attendee_id: str, registry: Registry = Depends(get_registry)):
        attendee = registry.get(attendee_id)
        if attendee is None:
            return JSONResponse(status_code=404, content={"error": "Attendee not found"})
        payload = ticket_codec.encode(attendee, get_settings().event_name)
        return Response(
            content=ticket_codec.render_qr_png(payload),
            media_type="image/png",
            headers={"Content-Disposition": f'inline; filename="ticket_{attendee.id}.png"'},
        )

    @app.post(
        "/api/checkin",
        response_model=AttendeeEnvelope,
        responses={404: {"model": ErrorBody}, 409: {"model": ErrorBody}},
        tags=["Check-In"],
    )
    def check_in(body: CheckInRequest, registry: Registry = Depends(get_registry)):
        result = process_check_in(registry, body.id, CheckInSource.API)

        if result.outcome is CheckInOutcome.NOT_FOUND:
            return JSONResponse(status_code=404, content={"error": "Attendee not found"})

        if result.outcome is CheckInOutcome.ALREADY_CHECKED_IN:
            body_out = ErrorBody(error="Already checked in", attendee=AttendeeOut.from_attendee(result.attendee))
            return JSONResponse(status_code=409, content=body_out.model_dump())

        return AttendeeEnvelope(data=AttendeeOut.from_attendee(result.attendee))

    return app


def main() -> None:
    uvicorn.run(create_app(), host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
