from .models import VehicleType, Fare, ParkingSpot, Ticket
from .strategies import PricingStrategy, FareCalculator, ParkingSpotAssigner

__all__ = [
    "VehicleType",
    "Fare",
    "ParkingSpot",
    "Ticket",
    "PricingStrategy",
    "FareCalculator",
    "ParkingSpotAssigner",
]
