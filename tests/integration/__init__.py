"""
Integration Tests Package for the Park-It Parking System

These tests run the application service against the SQLAlchemy
repositories on an in-memory SQLite database.

Integration tests focus on:
1. Entry and exit persisted end to end
2. Ticket and spot state as seen by the database
3. Recurring-user pricing across stored tickets
"""

__version__ = "1.0.0"


class IntegrationTestConfig:
    """Configuration for integration tests"""

    # in-memory SQLite shared through a static pool
    TEST_DATABASE_URL = "sqlite://"

    VEHICLE_REGISTRATION_NUMBER = "ABCDEF"
