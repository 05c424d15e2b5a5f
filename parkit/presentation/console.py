# File: parkit/presentation/console.py
"""
Console presentation layer

ConsoleInputReader reads operator input, InteractiveShell runs the menu loop
and renders service results. Neither holds business rules.
"""

from typing import Callable
from decimal import Decimal
import logging

from ..domain.models import MAX_REGISTRATION_NUMBER_LENGTH
from ..application.parking_service import VehicleFlowService, ParkingServiceError
from ..application.dtos import ParkingAllocationDTO, ParkingExitDTO, EntryStatus, ExitStatus


def format_percentage(rate: Decimal) -> str:
    """0.05 -> '5%'"""
    return f"{(Decimal(str(rate)) * 100).normalize():f}%"


class ConsoleInputReader:
    """Reads menu selections and registration numbers from the console"""

    def __init__(
        self,
        input_func: Callable[[], str] = input,
        output: Callable[[str], None] = print
    ):
        self.input_func = input_func
        self.output = output
        self.logger = logging.getLogger(self.__class__.__name__)

    def read_selection(self) -> int:
        """Return the typed number, or -1 when the input is not a number"""
        raw = self.input_func()
        try:
            return int(raw.strip())
        except (ValueError, AttributeError):
            self.logger.error(f"Error while reading user input from shell: {raw!r}")
            self.output("Error reading input. Please enter valid number for proceeding further")
            return -1

    def read_vehicle_registration_number(self) -> str:
        vehicle_reg_number = (self.input_func() or "").strip()
        if not vehicle_reg_number:
            self.logger.error("Empty vehicle registration number")
            raise ValueError("Invalid input provided")
        if len(vehicle_reg_number) > MAX_REGISTRATION_NUMBER_LENGTH:
            self.logger.error(f"Vehicle registration number too long: {vehicle_reg_number!r}")
            raise ValueError(
                f"Vehicle registration number must be at most {MAX_REGISTRATION_NUMBER_LENGTH} characters"
            )
        return vehicle_reg_number


class InteractiveShell:
    """Menu loop of the parking application"""

    MENU = (
        "Please select an option. Simply enter the number to choose an action\n"
        "1 New Vehicle Entering - allocate Parking Space\n"
        "2 Vehicle Exiting - generate Ticket price\n"
        "3 Shutdown System"
    )

    def __init__(
        self,
        service: VehicleFlowService,
        input_reader: ConsoleInputReader,
        output: Callable[[str], None] = print,
        discount_rate: Decimal = Decimal('0.05')
    ):
        self.service = service
        self.input_reader = input_reader
        self.output = output
        self.discount_text = format_percentage(discount_rate)
        self.logger = logging.getLogger(self.__class__.__name__)

    def run(self):
        self.logger.info("App initialized!!!")
        self.output("Welcome to Parking System!")

        while True:
            self.output(self.MENU)
            option = self.input_reader.read_selection()
            if option == 1:
                self.handle_entry()
            elif option == 2:
                self.handle_exit()
            elif option == 3:
                self.output("Exiting from the system!")
                break
            else:
                self.output("Unsupported option. Please enter a number corresponding to the provided menu")

        self.logger.info("Shell stopped")

    def handle_entry(self):
        self.output("Please select vehicle type from menu\n1 CAR\n2 BIKE")
        try:
            result = self.service.process_incoming_vehicle()
        except (ParkingServiceError, ValueError) as e:
            self.logger.warning(f"Unable to process incoming vehicle: {e}")
            self.output(f"Unable to process incoming vehicle: {e}")
            return
        self.render_allocation(result)

    def handle_exit(self):
        self.output("Please type the vehicle registration number and press enter key")
        try:
            result = self.service.process_exiting_vehicle()
        except (ParkingServiceError, ValueError) as e:
            self.logger.warning(f"Unable to process exiting vehicle: {e}")
            self.output(f"Unable to process exiting vehicle: {e}")
            return
        self.render_exit(result)

    def render_allocation(self, result: ParkingAllocationDTO):
        if result.status == EntryStatus.NO_CAPACITY:
            self.output("Error fetching next available parking slot. Parking slots might be full")
            return
        if result.status != EntryStatus.PARKED:
            self.output(result.message)
            return

        if result.recurring_user:
            self.output(
                "Welcome back! As a recurring user of our parking lot, "
                f"you'll benefit from a {self.discount_text} discount."
            )
        self.output("Generated Ticket and saved in DB")
        self.output(f"Please park your vehicle in spot number: {result.spot_number}")
        self.output(
            f"Recorded in-time for vehicle number: {result.license_plate} is: {result.in_time:%Y-%m-%d %H:%M:%S}"
        )

    def render_exit(self, result: ParkingExitDTO):
        if result.status == ExitStatus.TICKET_UPDATE_FAILED:
            self.output(result.message)
            return

        self.output(f"Please pay the parking fare: {result.fare}")
        if result.discount_applied:
            self.output(f"A {self.discount_text} recurring user discount has been applied")
        self.output(
            f"Recorded out-time for vehicle number: {result.license_plate} is: {result.out_time:%Y-%m-%d %H:%M:%S}"
        )
        if result.status == ExitStatus.SPOT_UPDATE_FAILED:
            self.output(result.message)
