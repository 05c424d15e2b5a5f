#!/usr/bin/env python3
"""
Parking Spot Assigner Unit Tests
"""

import unittest
from unittest.mock import create_autospec

from parkit.domain.models import VehicleType
from parkit.domain.strategies import ParkingSpotAssigner
from parkit.infrastructure.repositories import ParkingSpotRepository


class TestParkingSpotAssigner(unittest.TestCase):
    """Unit tests for ParkingSpotAssigner"""

    def setUp(self):
        self.spot_repository = create_autospec(ParkingSpotRepository, instance=True)
        self.assigner = ParkingSpotAssigner(self.spot_repository)

    def test_next_available_spot(self):
        """The storage's next free spot is returned"""
        self.spot_repository.get_next_available_slot.return_value = 1

        spot_id = self.assigner.next_available_spot(VehicleType.CAR)

        self.assertEqual(spot_id, 1)
        self.spot_repository.get_next_available_slot.assert_called_once_with(VehicleType.CAR)

    def test_no_spot_available(self):
        """None, 0 and -1 all mean the facility is full for that type"""
        for sentinel in (None, 0, -1):
            with self.subTest(sentinel=sentinel):
                self.spot_repository.get_next_available_slot.return_value = sentinel
                self.assertIsNone(self.assigner.next_available_spot(VehicleType.BIKE))

    def test_unknown_vehicle_type(self):
        """An unknown vehicle type never reaches the storage"""
        with self.assertRaises(ValueError):
            self.assigner.next_available_spot("TRUCK")
        self.spot_repository.get_next_available_slot.assert_not_called()

    def test_assigner_does_not_reserve(self):
        """Finding a spot is read-only"""
        self.spot_repository.get_next_available_slot.return_value = 4
        self.assigner.next_available_spot(VehicleType.BIKE)
        self.spot_repository.update_parking.assert_not_called()


if __name__ == "__main__":
    unittest.main()
