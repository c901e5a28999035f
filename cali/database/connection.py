from sqlalchemy import create_engine, inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool
from .base import Base
from .models import CalendarRow
from ..errors import StorageUnavailableError
import os
import logging

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = 'calendar.db'


class DatabaseManager:
    def __init__(self, db_path=None):
        if db_path is None:
            db_path = DEFAULT_DB_PATH

        self.db_path = os.fspath(db_path)

        # Every session checks out a brand new connection to the file and
        # closes it again, nothing is pooled between operations.
        self.engine = create_engine(
            f'sqlite:///{self.db_path}',
            poolclass=NullPool
        )

        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine
        )

    def init_database(self):
        """Create the calendars table if it doesn't already exist"""
        try:
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError as e:
            logger.error(f"Error initializing database at {self.db_path}: {str(e)}")
            raise StorageUnavailableError(
                f"Unable to open calendar database '{self.db_path}': {e}"
            ) from e
        logger.debug(f"Calendar table ready in {self.db_path}")

    def has_calendar_table(self) -> bool:
        try:
            return inspect(self.engine).has_table(CalendarRow.__tablename__)
        except SQLAlchemyError as e:
            logger.error(f"Error inspecting database at {self.db_path}: {str(e)}")
            raise StorageUnavailableError(
                f"Unable to open calendar database '{self.db_path}': {e}"
            ) from e

    def get_session(self):
        return self.SessionLocal()

    def dispose(self):
        self.engine.dispose()
