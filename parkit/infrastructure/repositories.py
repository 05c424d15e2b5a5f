# File: parkit/infrastructure/repositories.py
"""
Repository Pattern Implementation for the Park-It Parking System

Repositories give the application service a small, synchronous interface to
the spot and ticket storage while hiding the storage technology.

Storage Implementations:
- InMemory*Repository - dictionary backed, for tests and demo runs
- SQLAlchemy*Repository - relational database through the SQLAlchemy ORM

Each SQLAlchemy call runs in its own short transaction. Write operations
report failure through their boolean result instead of raising.
"""

from abc import ABC, abstractmethod
from typing import Optional, List, Dict, Iterator, Iterable, Tuple
from datetime import datetime
from decimal import Decimal
from contextlib import contextmanager
import copy
import logging

from sqlalchemy import (
    create_engine, Column, Integer, String, Boolean, DateTime,
    ForeignKey, Numeric, func, select, update, delete
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session, relationship
from sqlalchemy.pool import StaticPool
from sqlalchemy.exc import SQLAlchemyError

from ..domain.models import VehicleType, ParkingSpot, Ticket, MAX_REGISTRATION_NUMBER_LENGTH


# Facility pool created on first start: three car spots then two bike spots
DEFAULT_PARKING_SPOTS: Tuple[Tuple[int, VehicleType], ...] = (
    (1, VehicleType.CAR),
    (2, VehicleType.CAR),
    (3, VehicleType.CAR),
    (4, VehicleType.BIKE),
    (5, VehicleType.BIKE),
)


# ============================================================================
# REPOSITORY INTERFACES
# ============================================================================

class ParkingSpotRepository(ABC):
    """Interface for parking spot persistence operations"""

    @abstractmethod
    def get_next_available_slot(self, vehicle_type: VehicleType) -> Optional[int]:
        """Return the lowest available spot number of the type, or None"""
        pass

    @abstractmethod
    def update_parking(self, parking_spot: ParkingSpot) -> bool:
        """Store the spot's availability. Returns True when one spot was updated"""
        pass


class TicketRepository(ABC):
    """Interface for ticket persistence operations"""

    @abstractmethod
    def save_ticket(self, ticket: Ticket) -> bool:
        """Store a new ticket and assign its id"""
        pass

    @abstractmethod
    def get_ticket(self, vehicle_registration_number: str) -> Optional[Ticket]:
        """Return the most recent ticket of the vehicle, or None"""
        pass

    @abstractmethod
    def update_ticket(self, ticket: Ticket) -> bool:
        """Store the exit time and price of a ticket"""
        pass

    @abstractmethod
    def get_ticket_count(self, vehicle_registration_number: str) -> int:
        """Return the number of tickets ever issued to the vehicle"""
        pass


# ============================================================================
# IN-MEMORY REPOSITORIES (For Testing)
# ============================================================================

class InMemoryParkingSpotRepository(ParkingSpotRepository):
    """In-memory spot storage"""

    def __init__(self, spots: Optional[Iterable[ParkingSpot]] = None):
        self._storage: Dict[int, ParkingSpot] = {}
        self._logger = logging.getLogger(self.__class__.__name__)
        for spot in spots if spots is not None else self.default_spots():
            self._storage[spot.id] = copy.copy(spot)

    @staticmethod
    def default_spots() -> List[ParkingSpot]:
        return [ParkingSpot(number, vehicle_type, True) for number, vehicle_type in DEFAULT_PARKING_SPOTS]

    def get_next_available_slot(self, vehicle_type: VehicleType) -> Optional[int]:
        available = [
            spot.id for spot in self._storage.values()
            if spot.vehicle_type == vehicle_type and spot.is_available
        ]
        return min(available) if available else None

    def update_parking(self, parking_spot: ParkingSpot) -> bool:
        stored = self._storage.get(parking_spot.id)
        if stored is None:
            self._logger.warning(f"Spot {parking_spot.id} does not exist")
            return False
        stored.is_available = parking_spot.is_available
        self._logger.debug(f"Updated spot {parking_spot.id}: available={parking_spot.is_available}")
        return True

    def get(self, spot_id: int) -> Optional[ParkingSpot]:
        spot = self._storage.get(spot_id)
        return copy.copy(spot) if spot else None


class InMemoryTicketRepository(TicketRepository):
    """In-memory ticket storage"""

    def __init__(self):
        self._storage: Dict[int, Ticket] = {}
        self._next_id = 1
        self._logger = logging.getLogger(self.__class__.__name__)

    def save_ticket(self, ticket: Ticket) -> bool:
        ticket.id = self._next_id
        self._next_id += 1
        self._storage[ticket.id] = self._copy(ticket)
        self._logger.debug(f"Saved ticket {ticket.id}")
        return True

    def get_ticket(self, vehicle_registration_number: str) -> Optional[Ticket]:
        tickets = [
            t for t in self._storage.values()
            if t.vehicle_registration_number == vehicle_registration_number
        ]
        if not tickets:
            return None
        latest = max(tickets, key=lambda t: (t.in_time, t.id))
        return self._copy(latest)

    def update_ticket(self, ticket: Ticket) -> bool:
        stored = self._storage.get(ticket.id)
        if stored is None:
            return False
        stored.out_time = ticket.out_time
        stored.price = ticket.price
        return True

    def get_ticket_count(self, vehicle_registration_number: str) -> int:
        return sum(
            1 for t in self._storage.values()
            if t.vehicle_registration_number == vehicle_registration_number
        )

    @staticmethod
    def _copy(ticket: Ticket) -> Ticket:
        clone = copy.copy(ticket)
        clone.parking_spot = copy.copy(ticket.parking_spot)
        return clone


# ============================================================================
# SQLALCHEMY ORM MODELS
# ============================================================================

Base = declarative_base()


class ParkingSpotModel(Base):
    """SQLAlchemy model for ParkingSpot"""
    __tablename__ = 'parking'

    parking_number = Column(Integer, primary_key=True, autoincrement=False)
    available = Column(Boolean, nullable=False, default=True)
    type = Column(String(10), nullable=False)

    tickets = relationship('TicketModel', back_populates='parking_spot')


class TicketModel(Base):
    """SQLAlchemy model for Ticket"""
    __tablename__ = 'ticket'

    id = Column(Integer, primary_key=True, autoincrement=True)
    parking_number = Column(Integer, ForeignKey('parking.parking_number'), nullable=False)
    vehicle_reg_number = Column(String(MAX_REGISTRATION_NUMBER_LENGTH), nullable=False, index=True)
    price = Column(Numeric(10, 3), nullable=False, default=Decimal('0'))
    in_time = Column(DateTime, nullable=False)
    out_time = Column(DateTime)

    parking_spot = relationship('ParkingSpotModel', back_populates='tickets')


# ============================================================================
# DOMAIN <-> ORM MAPPERS
# ============================================================================

class Mapper:
    """Maps between domain models and ORM models"""

    @staticmethod
    def parking_spot_to_domain(model: ParkingSpotModel) -> ParkingSpot:
        return ParkingSpot(
            id=model.parking_number,
            vehicle_type=VehicleType(model.type),
            is_available=model.available
        )

    @staticmethod
    def ticket_to_orm(ticket: Ticket) -> TicketModel:
        return TicketModel(
            parking_number=ticket.parking_spot.id,
            vehicle_reg_number=ticket.vehicle_registration_number,
            price=ticket.price,
            in_time=ticket.in_time,
            out_time=ticket.out_time
        )

    @staticmethod
    def ticket_to_domain(model: TicketModel) -> Ticket:
        return Ticket(
            id=model.id,
            parking_spot=Mapper.parking_spot_to_domain(model.parking_spot),
            vehicle_registration_number=model.vehicle_reg_number,
            in_time=model.in_time,
            out_time=model.out_time,
            price=Decimal(str(model.price)) if model.price is not None else Decimal('0')
        )


# ============================================================================
# DATABASE
# ============================================================================

class Database:
    """
    Owns the SQLAlchemy engine and session factory

    An in-memory SQLite URL shares a single connection so that every
    session sees the same data.
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self._logger = logging.getLogger(self.__class__.__name__)

        engine_options = {"echo": echo}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            engine_options.update(
                poolclass=StaticPool,
                connect_args={"check_same_thread": False}
            )
        self.engine = create_engine(database_url, **engine_options)
        self.session_factory = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Provide a transactional scope around a series of operations"""
        session = self.session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def create_schema(self):
        Base.metadata.create_all(bind=self.engine)
        self._logger.debug("Database schema created")

    def seed_parking_spots(
        self,
        spots: Iterable[Tuple[int, VehicleType]] = DEFAULT_PARKING_SPOTS
    ) -> int:
        """Insert the facility's spots when the parking table is empty"""
        with self.session_scope() as session:
            existing = session.scalar(select(func.count()).select_from(ParkingSpotModel))
            if existing:
                return 0
            models = [
                ParkingSpotModel(parking_number=number, available=True, type=vehicle_type.value)
                for number, vehicle_type in spots
            ]
            session.add_all(models)
        self._logger.info(f"Seeded {len(models)} parking spots")
        return len(models)

    def clear_database_entries(self):
        """Make every spot available and drop all tickets"""
        with self.session_scope() as session:
            session.execute(update(ParkingSpotModel).values(available=True))
            session.execute(delete(TicketModel))

    def dispose(self):
        self.engine.dispose()


# ============================================================================
# SQLALCHEMY REPOSITORIES
# ============================================================================

class SQLAlchemyParkingSpotRepository(ParkingSpotRepository):
    """Repository for parking spots"""

    def __init__(self, database: Database):
        self.database = database
        self._logger = logging.getLogger(self.__class__.__name__)

    def get_next_available_slot(self, vehicle_type: VehicleType) -> Optional[int]:
        try:
            with self.database.session_scope() as session:
                return session.scalar(
                    select(func.min(ParkingSpotModel.parking_number)).where(
                        ParkingSpotModel.type == vehicle_type.value,
                        ParkingSpotModel.available == True
                    )
                )
        except SQLAlchemyError as e:
            self._logger.error(f"Database error finding available slot: {e}")
            raise

    def update_parking(self, parking_spot: ParkingSpot) -> bool:
        try:
            with self.database.session_scope() as session:
                result = session.execute(
                    update(ParkingSpotModel)
                    .where(ParkingSpotModel.parking_number == parking_spot.id)
                    .values(available=parking_spot.is_available)
                )
                return result.rowcount == 1
        except SQLAlchemyError as e:
            self._logger.error(f"Database error updating spot {parking_spot.id}: {e}")
            return False

    def get(self, spot_id: int) -> Optional[ParkingSpot]:
        try:
            with self.database.session_scope() as session:
                model = session.get(ParkingSpotModel, spot_id)
                return Mapper.parking_spot_to_domain(model) if model else None
        except SQLAlchemyError as e:
            self._logger.error(f"Database error getting spot {spot_id}: {e}")
            raise


class SQLAlchemyTicketRepository(TicketRepository):
    """Repository for tickets"""

    def __init__(self, database: Database):
        self.database = database
        self._logger = logging.getLogger(self.__class__.__name__)

    def save_ticket(self, ticket: Ticket) -> bool:
        try:
            with self.database.session_scope() as session:
                model = Mapper.ticket_to_orm(ticket)
                session.add(model)
                session.flush()
                ticket.id = model.id
            self._logger.debug(f"Saved ticket {ticket.id}")
            return True
        except SQLAlchemyError as e:
            self._logger.error(f"Database error saving ticket: {e}")
            return False

    def get_ticket(self, vehicle_registration_number: str) -> Optional[Ticket]:
        try:
            with self.database.session_scope() as session:
                model = session.scalars(
                    select(TicketModel)
                    .where(TicketModel.vehicle_reg_number == vehicle_registration_number)
                    .order_by(TicketModel.in_time.desc(), TicketModel.id.desc())
                    .limit(1)
                ).first()
                return Mapper.ticket_to_domain(model) if model else None
        except SQLAlchemyError as e:
            self._logger.error(f"Database error getting ticket: {e}")
            raise

    def update_ticket(self, ticket: Ticket) -> bool:
        try:
            with self.database.session_scope() as session:
                result = session.execute(
                    update(TicketModel)
                    .where(TicketModel.id == ticket.id)
                    .values(price=ticket.price, out_time=ticket.out_time)
                )
                return result.rowcount == 1
        except SQLAlchemyError as e:
            self._logger.error(f"Database error updating ticket {ticket.id}: {e}")
            return False

    def get_ticket_count(self, vehicle_registration_number: str) -> int:
        try:
            with self.database.session_scope() as session:
                return session.scalar(
                    select(func.count(TicketModel.id))
                    .where(TicketModel.vehicle_reg_number == vehicle_registration_number)
                ) or 0
        except SQLAlchemyError as e:
            self._logger.error(f"Database error counting tickets: {e}")
            raise
