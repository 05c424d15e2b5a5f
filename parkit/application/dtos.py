# File: parkit/application/dtos.py
"""
Data Transfer Objects (DTOs) for the Park-It Parking System

Results returned by the application service to the presentation layer.
No business logic here, only data and serialization support.
"""

from typing import Dict, Any, Optional
from datetime import datetime
from decimal import Decimal
from enum import Enum
from pydantic import BaseModel, Field, ConfigDict


# ============================================================================
# BASE DTO CLASSES
# ============================================================================

class BaseDTO(BaseModel):
    """Base DTO with common functionality"""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        frozen=True
    )

    def to_dict(self, exclude_none: bool = False, **kwargs) -> Dict[str, Any]:
        """Convert DTO to dictionary"""
        return self.model_dump(exclude_none=exclude_none, **kwargs)

    def to_json(self, **kwargs) -> str:
        """Convert DTO to JSON string"""
        return self.model_dump_json(**kwargs)


# ============================================================================
# ENUM DTOs
# ============================================================================

class EntryStatus(str, Enum):
    PARKED = "parked"
    NO_CAPACITY = "no_capacity"
    SPOT_UPDATE_FAILED = "spot_update_failed"
    TICKET_SAVE_FAILED = "ticket_save_failed"


class ExitStatus(str, Enum):
    EXITED = "exited"
    TICKET_UPDATE_FAILED = "ticket_update_failed"
    SPOT_UPDATE_FAILED = "spot_update_failed"


# ============================================================================
# PARKING OPERATION DTOs
# ============================================================================

class ParkingAllocationDTO(BaseDTO):
    """DTO for the outcome of a vehicle entry"""
    status: EntryStatus = Field(description="Entry outcome")
    vehicle_type: Optional[str] = Field(default=None, description="Requested vehicle type")
    spot_number: Optional[int] = Field(default=None, description="Allocated spot number")
    license_plate: Optional[str] = Field(default=None, description="Vehicle registration number")
    in_time: Optional[datetime] = Field(default=None, description="Entry time")
    recurring_user: bool = Field(default=False, description="Vehicle qualifies for the recurring discount")
    message: Optional[str] = Field(default=None, description="Result message")

    @property
    def success(self) -> bool:
        return self.status == EntryStatus.PARKED


class ParkingExitDTO(BaseDTO):
    """DTO for the outcome of a vehicle exit"""
    status: ExitStatus = Field(description="Exit outcome")
    license_plate: str = Field(description="Vehicle registration number")
    spot_number: int = Field(description="Spot the vehicle occupied")
    in_time: datetime = Field(description="Entry time")
    out_time: datetime = Field(description="Exit time")
    duration_hours: float = Field(ge=0, description="Parking duration in hours")
    fare: Decimal = Field(ge=0, description="Fare charged")
    discount_applied: bool = Field(default=False, description="Recurring-user discount applied")
    message: Optional[str] = Field(default=None, description="Result message")

    @property
    def success(self) -> bool:
        return self.status == ExitStatus.EXITED
