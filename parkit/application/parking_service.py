# File: parkit/application/parking_service.py
"""
Parking Management Application Service

This module implements the application service layer of the parking system.
It orchestrates the domain rules and the storage collaborators for the two
use cases of the facility:

1. Vehicle entry - allocate a spot and issue a ticket
2. Vehicle exit - price the stay, close the ticket and free the spot

Key Principles:
- Dependency Injection for every collaborator (input, storage, clock)
- The service is the only component changing spot availability
- A spot is reserved before its ticket is written, and only released
  once the closed ticket has been stored
"""

from typing import Optional, Callable, Protocol, runtime_checkable
from datetime import datetime
import logging

from ..domain.models import VehicleType, ParkingSpot, Ticket
from ..domain.strategies import PricingStrategy, FareCalculator, ParkingSpotAssigner
from ..infrastructure.repositories import ParkingSpotRepository, TicketRepository
from .dtos import ParkingAllocationDTO, ParkingExitDTO, EntryStatus, ExitStatus


# ============================================================================
# COLLABORATOR INTERFACES
# ============================================================================

@runtime_checkable
class InputReader(Protocol):
    """Source of operator input"""

    def read_selection(self) -> int:
        """Return the selected menu entry"""
        ...

    def read_vehicle_registration_number(self) -> str:
        """Return the registration number typed by the operator"""
        ...


# ============================================================================
# EXCEPTIONS
# ============================================================================

class ParkingServiceError(Exception):
    """Base exception for parking service errors"""
    pass


class InvalidVehicleSelectionError(ParkingServiceError, ValueError):
    """Exception for a vehicle type selection outside the menu"""

    def __init__(self, selection: int):
        super().__init__(f"Incorrect vehicle type selection: {selection}")
        self.selection = selection


class TicketNotFoundError(ParkingServiceError):
    """Exception when a vehicle has no open ticket"""

    def __init__(self, license_plate: str):
        super().__init__(f"No open ticket found for vehicle {license_plate}")
        self.license_plate = license_plate


# ============================================================================
# MAIN PARKING SERVICE
# ============================================================================

class VehicleFlowService:
    """
    Application service for vehicle entry and exit

    Collaborators:
        input_reader: operator input (vehicle type selection, registration number)
        parking_spot_repository: spot storage
        ticket_repository: ticket storage
        fare_calculator: pricing strategy, FareCalculator with default rates if omitted
        spot_assigner: allocation strategy, built on the spot storage if omitted
        recurring_ticket_threshold: ticket count from which the discount applies
        clock: source of the current time
    """

    def __init__(
        self,
        input_reader: InputReader,
        parking_spot_repository: ParkingSpotRepository,
        ticket_repository: TicketRepository,
        fare_calculator: Optional[PricingStrategy] = None,
        spot_assigner: Optional[ParkingSpotAssigner] = None,
        recurring_ticket_threshold: int = 2,
        clock: Callable[[], datetime] = datetime.now
    ):
        if recurring_ticket_threshold < 1:
            raise ValueError("Recurring ticket threshold must be at least 1")

        self.logger = logging.getLogger(self.__class__.__name__)
        self.input_reader = input_reader
        self.parking_spot_repository = parking_spot_repository
        self.ticket_repository = ticket_repository
        self.fare_calculator = fare_calculator or FareCalculator()
        self.spot_assigner = spot_assigner or ParkingSpotAssigner(parking_spot_repository)
        self.recurring_ticket_threshold = recurring_ticket_threshold
        self.clock = clock

    def process_incoming_vehicle(self) -> ParkingAllocationDTO:
        """
        Park an incoming vehicle

        Use Case: Vehicle Entry
        1. Read the vehicle type
        2. Find a free spot of that type
        3. Read the registration number
        4. Reserve the spot
        5. Issue the ticket, releasing the spot again if it cannot be saved

        Raises: InvalidVehicleSelectionError for an unknown vehicle type selection
        Returns: Allocation result, NO_CAPACITY when the facility is full
        """
        vehicle_type = self.read_vehicle_type()

        spot_id = self.spot_assigner.next_available_spot(vehicle_type)
        if spot_id is None:
            self.logger.warning(f"No {vehicle_type.value} spot available, entry refused")
            return ParkingAllocationDTO(
                status=EntryStatus.NO_CAPACITY,
                vehicle_type=vehicle_type.value,
                message="Parking slots might be full"
            )

        license_plate = self.input_reader.read_vehicle_registration_number()
        self.logger.info(f"Processing entry of {license_plate} ({vehicle_type.value})")

        parking_spot = ParkingSpot(spot_id, vehicle_type, True)
        parking_spot.occupy()
        if not self.parking_spot_repository.update_parking(parking_spot):
            self.logger.error(f"Unable to reserve spot {spot_id} for {license_plate}")
            return ParkingAllocationDTO(
                status=EntryStatus.SPOT_UPDATE_FAILED,
                vehicle_type=vehicle_type.value,
                spot_number=spot_id,
                license_plate=license_plate,
                message="Unable to reserve the parking spot"
            )

        ticket = Ticket(
            parking_spot=parking_spot,
            vehicle_registration_number=license_plate,
            in_time=self.clock()
        )
        if not self.ticket_repository.save_ticket(ticket):
            self.logger.error(f"Unable to save ticket of {license_plate}, releasing spot {spot_id}")
            parking_spot.release()
            if not self.parking_spot_repository.update_parking(parking_spot):
                self.logger.error(f"Spot {spot_id} could not be released after the failed ticket save")
            return ParkingAllocationDTO(
                status=EntryStatus.TICKET_SAVE_FAILED,
                vehicle_type=vehicle_type.value,
                spot_number=spot_id,
                license_plate=license_plate,
                message="Unable to save the parking ticket. Error occurred"
            )

        recurring_user = self.is_recurring_user(license_plate)
        self.logger.info(f"Vehicle {license_plate} parked in spot {spot_id}")

        return ParkingAllocationDTO(
            status=EntryStatus.PARKED,
            vehicle_type=vehicle_type.value,
            spot_number=spot_id,
            license_plate=license_plate,
            in_time=ticket.in_time,
            recurring_user=recurring_user,
            message="Vehicle parked successfully"
        )

    def process_exiting_vehicle(self) -> ParkingExitDTO:
        """
        Let a parked vehicle leave

        Use Case: Vehicle Exit
        1. Read the registration number and fetch its open ticket
        2. Compute the fare, discounted for recurring users
        3. Store the closed ticket
        4. Release the spot, only if step 3 succeeded

        Raises: TicketNotFoundError when the vehicle has no open ticket
        Returns: Exit result, TICKET_UPDATE_FAILED leaves the spot reserved
        """
        license_plate = self.input_reader.read_vehicle_registration_number()
        self.logger.info(f"Processing exit of {license_plate}")

        ticket = self.ticket_repository.get_ticket(license_plate)
        if ticket is None or not ticket.is_open:
            raise TicketNotFoundError(license_plate)

        out_time = self.clock()
        discount = self.is_recurring_user(license_plate)
        fare = self.fare_calculator.compute_fare(
            ticket.in_time,
            out_time,
            ticket.parking_spot.vehicle_type,
            discount
        )
        ticket.close(out_time, fare)

        result = dict(
            license_plate=license_plate,
            spot_number=ticket.parking_spot.id,
            in_time=ticket.in_time,
            out_time=out_time,
            duration_hours=ticket.duration_hours,
            fare=fare,
            discount_applied=discount
        )

        if not self.ticket_repository.update_ticket(ticket):
            self.logger.error(f"Unable to update ticket of {license_plate}, spot stays reserved")
            return ParkingExitDTO(
                status=ExitStatus.TICKET_UPDATE_FAILED,
                message="Unable to update ticket information. Error occurred",
                **result
            )

        parking_spot = ticket.parking_spot
        parking_spot.release()
        if not self.parking_spot_repository.update_parking(parking_spot):
            self.logger.error(f"Ticket of {license_plate} closed but spot {parking_spot.id} was not released")
            return ParkingExitDTO(
                status=ExitStatus.SPOT_UPDATE_FAILED,
                message="Unable to release the parking spot",
                **result
            )

        self.logger.info(f"Vehicle {license_plate} left spot {parking_spot.id}, fare {fare}")
        return ParkingExitDTO(status=ExitStatus.EXITED, message="Vehicle exited successfully", **result)

    def read_vehicle_type(self) -> VehicleType:
        """Read the operator's vehicle type selection"""
        selection = self.input_reader.read_selection()
        try:
            return VehicleType.from_selection(selection)
        except ValueError:
            self.logger.error(f"Incorrect input provided: {selection}")
            raise InvalidVehicleSelectionError(selection) from None

    def is_recurring_user(self, license_plate: str) -> bool:
        return self.ticket_repository.get_ticket_count(license_plate) >= self.recurring_ticket_threshold
