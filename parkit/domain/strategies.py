# File: parkit/domain/strategies.py
"""
Strategy Implementations for the Park-It Parking System

This module holds the two business-rule components the application service
is composed from:

1. FareCalculator - pricing strategy turning a parked duration into a fare
2. ParkingSpotAssigner - allocation strategy picking the next free spot

Both are stateless apart from their configuration and can be replaced
with test doubles when the service is constructed.
"""

from abc import ABC, abstractmethod
from typing import Optional, Dict, Protocol
from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
import logging

from .models import VehicleType, Fare, Ticket


MILLISECONDS_PER_HOUR = Decimal(3600000)
PRICE_PRECISION = Decimal('0.001')


# ============================================================================
# STRATEGY INTERFACES
# ============================================================================

class PricingStrategy(ABC):
    """
    Abstract base class for pricing strategies
    Defines the interface for fee calculation algorithms
    """

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def compute_fare(
        self,
        in_time: datetime,
        out_time: Optional[datetime],
        vehicle_type: VehicleType,
        apply_discount: bool = False
    ) -> Decimal:
        """
        Calculate the fare of a stay
        Returns: Calculated fare
        """
        pass

    def calculate_fare(self, ticket: Ticket, apply_discount: bool = False) -> Decimal:
        """Compute the fare from the ticket's own fields and store it on the ticket"""
        price = self.compute_fare(
            ticket.in_time,
            ticket.out_time,
            ticket.parking_spot.vehicle_type,
            apply_discount
        )
        ticket.price = price
        return price


class SpotAvailabilitySource(Protocol):
    """Read side of the spot storage used for allocation"""

    def get_next_available_slot(self, vehicle_type: VehicleType) -> Optional[int]:
        ...


# ============================================================================
# PRICING STRATEGIES
# ============================================================================

class FareCalculator(PricingStrategy):
    """
    Strategy: Hourly fare with a free period and a recurring-user discount

    - Stays up to the free period (30 minutes by default) cost nothing
    - Longer stays are charged the full duration at the vehicle's hourly rate
    - Recurring users get the discount factor applied (5% off by default)
    - Fares are rounded half-up to 3 decimal places
    """

    def __init__(
        self,
        rates: Optional[Dict[VehicleType, Decimal]] = None,
        free_period: timedelta = timedelta(minutes=30),
        discount_rate: Decimal = Decimal('0.05')
    ):
        super().__init__()
        if rates is None:
            rates = {
                VehicleType.CAR: Fare.CAR_RATE_PER_HOUR,
                VehicleType.BIKE: Fare.BIKE_RATE_PER_HOUR,
            }
        self.rates = {vehicle_type: Decimal(str(rate)) for vehicle_type, rate in rates.items()}
        self.free_period_hours = Decimal(free_period // timedelta(milliseconds=1)) / MILLISECONDS_PER_HOUR
        self.discount_factor = Decimal('1') - Decimal(str(discount_rate))

    def rate_per_hour(self, vehicle_type: VehicleType) -> Decimal:
        if not isinstance(vehicle_type, VehicleType) or vehicle_type not in self.rates:
            raise ValueError(f"Unknown vehicle type: {vehicle_type}")
        return self.rates[vehicle_type]

    def compute_fare(
        self,
        in_time: datetime,
        out_time: Optional[datetime],
        vehicle_type: VehicleType,
        apply_discount: bool = False
    ) -> Decimal:
        if in_time is None or out_time is None or out_time < in_time:
            raise ValueError(f"Out time provided is incorrect: {out_time}")

        rate = self.rate_per_hour(vehicle_type)

        elapsed_ms = (out_time - in_time) // timedelta(milliseconds=1)
        duration = Decimal(elapsed_ms) / MILLISECONDS_PER_HOUR

        if duration <= self.free_period_hours:
            self.logger.debug(f"Stay of {duration:.3f}h is within the free period")
            return Decimal('0').quantize(PRICE_PRECISION)

        price = duration * rate
        if apply_discount:
            price *= self.discount_factor

        return price.quantize(PRICE_PRECISION, rounding=ROUND_HALF_UP)


# ============================================================================
# PARKING ALLOCATION STRATEGIES
# ============================================================================

class ParkingSpotAssigner:
    """
    Strategy: Lowest-numbered free spot of the requested type

    Read-only: the caller is responsible for reserving the returned spot.
    """

    def __init__(self, spot_source: SpotAvailabilitySource):
        self.spot_source = spot_source
        self.logger = logging.getLogger(self.__class__.__name__)

    def next_available_spot(self, vehicle_type: VehicleType) -> Optional[int]:
        """
        Find the next available spot for the vehicle type
        Returns: spot number, or None when the facility is full for that type
        """
        if not isinstance(vehicle_type, VehicleType):
            raise ValueError(f"Unknown vehicle type: {vehicle_type}")

        spot_id = self.spot_source.get_next_available_slot(vehicle_type)

        # storages report "no spot" as None, 0 or -1
        if spot_id is None or spot_id <= 0:
            self.logger.debug(f"No {vehicle_type.value} spot available")
            return None

        return spot_id
