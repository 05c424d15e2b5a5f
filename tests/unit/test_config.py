#!/usr/bin/env python3
"""
Configuration Unit Tests
"""

import unittest
from datetime import datetime, timedelta
from decimal import Decimal

from pydantic import ValidationError

from parkit.domain.models import VehicleType
from parkit.infrastructure.config import AppConfig


class TestAppConfig(unittest.TestCase):
    """Unit tests for AppConfig"""

    def test_defaults(self):
        config = AppConfig.from_env({})

        self.assertEqual(config.car_rate_per_hour, Decimal('1.5'))
        self.assertEqual(config.bike_rate_per_hour, Decimal('1.0'))
        self.assertEqual(config.free_period_minutes, 30)
        self.assertEqual(config.recurring_ticket_threshold, 2)
        self.assertEqual(config.log_level, "INFO")
        self.assertTrue(config.seed_parking_spots)
        self.assertTrue(config.database_url.startswith("sqlite"))

    def test_values_from_environment(self):
        config = AppConfig.from_env({
            "PARKIT_DATABASE_URL": "sqlite://",
            "PARKIT_CAR_RATE_PER_HOUR": "2.5",
            "PARKIT_RECURRING_TICKET_THRESHOLD": "3",
            "PARKIT_LOG_LEVEL": "debug",
            "PARKIT_SEED_PARKING_SPOTS": "false",
        })

        self.assertEqual(config.database_url, "sqlite://")
        self.assertEqual(config.car_rate_per_hour, Decimal('2.5'))
        self.assertEqual(config.recurring_ticket_threshold, 3)
        self.assertEqual(config.log_level, "DEBUG")
        self.assertFalse(config.seed_parking_spots)

    def test_generic_database_url(self):
        """DATABASE_URL is used when the prefixed variable is absent"""
        config = AppConfig.from_env({"DATABASE_URL": "sqlite:///other.db"})
        self.assertEqual(config.database_url, "sqlite:///other.db")

        config = AppConfig.from_env({
            "DATABASE_URL": "sqlite:///other.db",
            "PARKIT_DATABASE_URL": "sqlite:///parkit.db",
        })
        self.assertEqual(config.database_url, "sqlite:///parkit.db")

    def test_invalid_values(self):
        invalid_environments = [
            {"PARKIT_CAR_RATE_PER_HOUR": "0"},
            {"PARKIT_BIKE_RATE_PER_HOUR": "-1"},
            {"PARKIT_FREE_PERIOD_MINUTES": "-5"},
            {"PARKIT_RECURRING_DISCOUNT_RATE": "1"},
            {"PARKIT_RECURRING_TICKET_THRESHOLD": "0"},
            {"PARKIT_LOG_LEVEL": "LOUD"},
        ]
        for environ in invalid_environments:
            with self.subTest(environ=environ):
                with self.assertRaises(ValidationError):
                    AppConfig.from_env(environ)

    def test_build_fare_calculator(self):
        """The fare calculator follows the configured rates"""
        config = AppConfig(
            car_rate_per_hour=Decimal('2'),
            bike_rate_per_hour=Decimal('1'),
            free_period_minutes=0,
            recurring_discount_rate=Decimal('0.5')
        )
        calculator = config.build_fare_calculator()

        out_time = datetime(2024, 3, 1, 10, 0, 0)
        in_time = out_time - timedelta(minutes=15)
        self.assertEqual(calculator.compute_fare(in_time, out_time, VehicleType.CAR), Decimal('0.5'))
        self.assertEqual(calculator.compute_fare(in_time, out_time, VehicleType.BIKE, True), Decimal('0.125'))


if __name__ == "__main__":
    unittest.main()
