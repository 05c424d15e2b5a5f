# File: parkit/domain/models.py
"""
Domain Models for the Park-It Parking System

This module contains:
1. Enums: vehicle types accepted by the facility
2. Constants: default hourly fares
3. Entities: parking spots and tickets with their lifecycle rules

Tickets move from OPEN (no exit time) to CLOSED (exit time and price set).
Parking spots toggle between available and occupied.
"""

from dataclasses import dataclass, field
from typing import Optional
from datetime import datetime
from decimal import Decimal
from enum import Enum


# ============================================================================
# ENUMS FOR DOMAIN TYPES
# ============================================================================

class VehicleType(Enum):
    """
    Enumeration of vehicle types
    Each type parks in its own pool of spots and has its own hourly rate
    """
    CAR = "CAR"
    BIKE = "BIKE"

    @classmethod
    def from_selection(cls, selection: int) -> 'VehicleType':
        """
        Map a menu selection to a vehicle type (1 -> CAR, 2 -> BIKE)
        Raises ValueError for any other selection
        """
        selections = {
            1: cls.CAR,
            2: cls.BIKE,
        }
        try:
            return selections[selection]
        except (KeyError, TypeError):
            raise ValueError(f"Incorrect vehicle type selection: {selection}") from None

    def __str__(self) -> str:
        return self.value.title()


class Fare:
    """Default hourly rates, overridable through configuration"""
    CAR_RATE_PER_HOUR = Decimal('1.5')
    BIKE_RATE_PER_HOUR = Decimal('1.0')


# Width of the stored registration number
MAX_REGISTRATION_NUMBER_LENGTH = 10


# ============================================================================
# DOMAIN ENTITIES
# ============================================================================

@dataclass
class ParkingSpot:
    """
    Entity: A numbered spot of the facility's fixed pool
    Only the availability flag changes over its lifetime
    """
    id: int
    vehicle_type: VehicleType
    is_available: bool = True

    def __post_init__(self):
        if self.id is None or self.id <= 0:
            raise ValueError(f"Parking spot number must be positive, got: {self.id}")

    def occupy(self):
        self.is_available = False

    def release(self):
        self.is_available = True

    def __eq__(self, other: object) -> bool:
        """Spots are identified by their number"""
        if not isinstance(other, ParkingSpot):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass
class Ticket:
    """
    Entity: A single stay of a vehicle in a parking spot

    The ticket is issued with an entry time and a zero price. On exit it is
    closed with the exit time and the computed fare; a closed ticket is
    never modified again.
    """
    parking_spot: ParkingSpot
    vehicle_registration_number: str
    in_time: datetime
    out_time: Optional[datetime] = None
    price: Decimal = field(default_factory=lambda: Decimal('0'))
    id: Optional[int] = None

    @property
    def is_open(self) -> bool:
        return self.out_time is None

    @property
    def duration_hours(self) -> Optional[float]:
        """Parked duration in hours, None while the ticket is open"""
        if self.out_time is None:
            return None
        return (self.out_time - self.in_time).total_seconds() / 3600

    def close(self, out_time: datetime, price: Decimal):
        """Set the exit time and the final price"""
        if not self.is_open:
            raise ValueError(f"Ticket {self.id} is already closed")
        if out_time < self.in_time:
            raise ValueError(
                f"Out time {out_time.isoformat()} is before in time {self.in_time.isoformat()}"
            )
        if price < 0:
            raise ValueError("Ticket price cannot be negative")

        self.out_time = out_time
        self.price = price

    def __str__(self) -> str:
        status = "open" if self.is_open else f"closed, {self.price}"
        return f"Ticket({self.vehicle_registration_number} in spot {self.parking_spot.id}, {status})"
