"""Request and response bodies for the REST API."""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.models.attendee import Attendee


class RegisterRequest(BaseModel):
    """
    Registration body. Server-assigned fields (id, status, checkInTime,
    aiPersona) are accepted for compatibility and ignored.
    """

    model_config = ConfigDict(extra="ignore")

    fullName: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    role: str = Field(..., min_length=1)
    ticketType: str = Field(..., min_length=1)


class CheckInRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., min_length=1)
    # Ignored: the server clock stamps check-ins
    checkInTime: Optional[str] = None


class AttendeeOut(BaseModel):
    id: str
    fullName: str
    email: str
    role: str
    ticketType: str
    status: str
    aiPersona: Optional[str] = None
    checkInTime: Optional[str] = None
    registeredAt: Optional[str] = None

    @classmethod
    def from_attendee(cls, attendee: Attendee) -> "AttendeeOut":
        return cls(**attendee.to_dict())


class AttendeeEnvelope(BaseModel):
    message: str = "success"
    data: AttendeeOut


class AttendeeListEnvelope(BaseModel):
    message: str = "success"
    data: List[AttendeeOut]


class ErrorBody(BaseModel):
    error: str
    attendee: Optional[AttendeeOut] = None
