# File: parkit/infrastructure/config.py
"""
Application configuration

Settings are read from PARKIT_* environment variables and validated with
pydantic. Anything not set falls back to the facility defaults.
"""

from typing import Any, Dict, Mapping, Optional
from datetime import timedelta
from decimal import Decimal
import logging
import os

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..domain.models import VehicleType, Fare
from ..domain.strategies import FareCalculator


ENV_PREFIX = "PARKIT_"


class AppConfig(BaseModel):
    """Validated application settings"""

    model_config = ConfigDict(frozen=True)

    database_url: str = Field(default="sqlite:///./parkit.db")
    car_rate_per_hour: Decimal = Field(default=Fare.CAR_RATE_PER_HOUR, gt=0)
    bike_rate_per_hour: Decimal = Field(default=Fare.BIKE_RATE_PER_HOUR, gt=0)
    free_period_minutes: int = Field(default=30, ge=0)
    recurring_discount_rate: Decimal = Field(default=Decimal('0.05'), ge=0, lt=1)
    recurring_ticket_threshold: int = Field(default=2, ge=1)
    log_level: str = Field(default="INFO")
    log_dir: str = Field(default="logs")
    seed_parking_spots: bool = Field(default=True)

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'AppConfig':
        """Build the configuration from environment variables"""
        if environ is None:
            environ = os.environ

        values: Dict[str, Any] = {}
        for name in cls.model_fields:
            key = ENV_PREFIX + name.upper()
            if key in environ:
                values[name] = environ[key]

        if "database_url" not in values and "DATABASE_URL" in environ:
            values["database_url"] = environ["DATABASE_URL"]

        return cls(**values)

    @property
    def rates(self) -> Dict[VehicleType, Decimal]:
        return {
            VehicleType.CAR: self.car_rate_per_hour,
            VehicleType.BIKE: self.bike_rate_per_hour,
        }

    def build_fare_calculator(self) -> FareCalculator:
        return FareCalculator(
            rates=self.rates,
            free_period=timedelta(minutes=self.free_period_minutes),
            discount_rate=self.recurring_discount_rate
        )
