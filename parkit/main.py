# File: parkit/main.py
"""
Main application entry point for the Park-It Parking System
Wires configuration, storage, business rules and the console shell
"""

from typing import Optional
import logging
import sys
import os

from .infrastructure.config import AppConfig
from .infrastructure.repositories import (
    Database, SQLAlchemyParkingSpotRepository, SQLAlchemyTicketRepository
)
from .domain.strategies import ParkingSpotAssigner
from .application.parking_service import VehicleFlowService
from .presentation.console import ConsoleInputReader, InteractiveShell


def setup_logging(config: AppConfig) -> logging.Logger:
    """Setup application logging configuration"""
    log_dir = config.log_dir
    if not os.path.exists(log_dir):
        os.makedirs(log_dir)

    logging.basicConfig(
        level=config.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(os.path.join(log_dir, 'parkit.log')),
            logging.StreamHandler(sys.stdout)
        ]
    )
    return logging.getLogger(__name__)


class ParkingApplication:
    """Main application controller that sets up all components"""

    def __init__(self, config: Optional[AppConfig] = None):
        self.config = config or AppConfig.from_env()
        self.logger = setup_logging(self.config)
        self.logger.info("Starting Parking System...")
        self.setup_components()

    def setup_components(self):
        """Initialize all application components with dependency injection"""
        try:
            # 1. Storage
            self.database = Database(self.config.database_url)
            self.database.create_schema()
            if self.config.seed_parking_spots:
                self.database.seed_parking_spots()
            self.parking_spot_repository = SQLAlchemyParkingSpotRepository(self.database)
            self.ticket_repository = SQLAlchemyTicketRepository(self.database)
            self.logger.info("Repositories initialized")

            # 2. Business rules
            self.fare_calculator = self.config.build_fare_calculator()
            self.spot_assigner = ParkingSpotAssigner(self.parking_spot_repository)

            # 3. Application service and console
            self.input_reader = ConsoleInputReader()
            self.parking_service = VehicleFlowService(
                input_reader=self.input_reader,
                parking_spot_repository=self.parking_spot_repository,
                ticket_repository=self.ticket_repository,
                fare_calculator=self.fare_calculator,
                spot_assigner=self.spot_assigner,
                recurring_ticket_threshold=self.config.recurring_ticket_threshold
            )
            self.shell = InteractiveShell(
                self.parking_service,
                self.input_reader,
                discount_rate=self.config.recurring_discount_rate
            )
            self.logger.info("Parking service initialized")

        except Exception as e:
            self.logger.error(f"Failed to initialize components: {str(e)}")
            raise

    def run(self):
        try:
            self.shell.run()
        finally:
            self.database.dispose()
            self.logger.info("Application shutting down...")


def main() -> int:
    """Main entry point for the application"""
    try:
        app = ParkingApplication()
        app.run()
    except (KeyboardInterrupt, EOFError):
        return 0
    except Exception as e:
        print(f"Fatal error: {str(e)}")
        logging.error(f"Fatal error in main: {str(e)}", exc_info=True)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
