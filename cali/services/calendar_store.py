from contextlib import contextmanager
from typing import List, Optional, Tuple
from sqlalchemy import delete, func, literal_column, select, update
from sqlalchemy.exc import SQLAlchemyError
from ..database.connection import DatabaseManager
from ..database.models import CalendarRow
from ..errors import AmbiguousDefaultError, CalendarExistsError, StorageIoError
from ..models.event import Event
import logging

logger = logging.getLogger(__name__)


class CalendarStore:
    """Row level access to the calendars table.

    Nothing is cached: every call runs in its own session, which opens the
    database file and closes it again before returning. A lookup that finds
    no rows answers False, None or an empty list, never an error.
    """

    def __init__(self, location):
        if isinstance(location, DatabaseManager):
            self.db = location
        else:
            self.db = DatabaseManager(location)

    @property
    def location(self) -> str:
        return self.db.db_path

    @contextmanager
    def _session(self, action: str):
        session = self.db.get_session()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Error {action}: {str(e)}")
            raise StorageIoError(f"Error {action}: {e}") from e
        finally:
            session.close()

    def initialize(self):
        self.db.init_database()

    def calendar_exists(self, name: str) -> bool:
        with self._session(f"checking for calendar '{name}'") as session:
            row = session.execute(
                select(CalendarRow.calendar_name)
                .where(CalendarRow.calendar_name == name)
                .limit(1)
            ).first()
            return row is not None

    def is_default(self, name: str) -> bool:
        with self._session(f"checking default flag of '{name}'") as session:
            row = session.execute(
                select(CalendarRow.is_default)
                .where(CalendarRow.calendar_name == name, CalendarRow.is_default == 1)
                .limit(1)
            ).first()
            return row is not None

    def get_default_name(self) -> Optional[str]:
        with self._session("looking up the default calendar") as session:
            names = session.execute(
                select(CalendarRow.calendar_name)
                .where(CalendarRow.is_default == 1)
                .distinct()
                .order_by(CalendarRow.calendar_name)
            ).scalars().all()

        if len(names) > 1:
            logger.error(f"More than one default calendar flagged: {names}")
            raise AmbiguousDefaultError(names)
        return names[0] if names else None

    def set_default(self, name: str):
        """Make `name` the only default calendar.

        Clearing the old default and flagging the new one commit together, so
        a failure part way through leaves the previous default in place.
        """
        with self._session(f"setting '{name}' as default") as session:
            session.execute(
                update(CalendarRow)
                .where(CalendarRow.is_default != 0)
                .values(is_default=0)
            )
            result = session.execute(
                update(CalendarRow)
                .where(CalendarRow.calendar_name == name)
                .values(is_default=1)
            )
            logger.info(f"Set '{name}' as default calendar ({result.rowcount} rows)")

    def insert_event(self, calendar_name: str, calendar_is_default: bool, event: Event):
        row = CalendarRow(
            event_id=str(event.id),
            calendar_name=calendar_name,
            event_name=event.name,
            event_start=event.start,
            event_end=event.end,
            event_recurring=str(event.recurring),
            is_default=int(bool(calendar_is_default))
        )
        with self._session(f"inserting event '{event.name}'") as session:
            session.add(row)
            logger.debug(f"Inserted row {row.to_dict()}")

    def find_events(self, calendar_name: str, query: str, exact: bool = False) -> List[Event]:
        """Events of a calendar whose name equals, or contains, `query`.

        Substring matching uses SQLite's LIKE, so it ignores ASCII case.
        Results come back in insertion (rowid) order.
        """
        if exact:
            name_filter = CalendarRow.event_name == query
        else:
            name_filter = CalendarRow.event_name.contains(query, autoescape=True)

        with self._session(f"searching '{calendar_name}' for '{query}'") as session:
            rows = session.execute(
                select(
                    CalendarRow.event_id,
                    CalendarRow.event_name,
                    CalendarRow.event_start,
                    CalendarRow.event_end,
                    CalendarRow.event_recurring
                )
                .where(CalendarRow.calendar_name == calendar_name, name_filter)
                .order_by(literal_column('rowid'))
            ).all()

        return [
            Event.reconstruct(row.event_id, row.event_name, row.event_start,
                              row.event_end, row.event_recurring)
            for row in rows
        ]

    def update_event(self, calendar, event: Event) -> int:
        """Rewrite every column of the row holding `event`.

        Rows are matched on event_id alone and calendar_name is rewritten too,
        so passing a different calendar moves the event into it.
        """
        with self._session(f"updating event '{event.id}'") as session:
            result = session.execute(
                update(CalendarRow)
                .where(CalendarRow.event_id == str(event.id))
                .values(
                    calendar_name=calendar.name,
                    event_name=event.name,
                    event_start=event.start,
                    event_end=event.end,
                    event_recurring=str(event.recurring),
                    is_default=int(bool(calendar.default))
                )
            )
            return result.rowcount

    def delete_event(self, calendar_name: str, event_id) -> int:
        with self._session(f"deleting event '{event_id}'") as session:
            result = session.execute(
                delete(CalendarRow)
                .where(CalendarRow.calendar_name == calendar_name,
                       CalendarRow.event_id == str(event_id))
            )
            return result.rowcount

    def delete_calendar(self, calendar_name: str):
        if not self.db.has_calendar_table():
            return

        with self._session(f"deleting calendar '{calendar_name}'") as session:
            result = session.execute(
                delete(CalendarRow).where(CalendarRow.calendar_name == calendar_name)
            )
            logger.info(f"Deleted calendar '{calendar_name}' ({result.rowcount} events)")

    def rename_calendar(self, old_name: str, new_name: str) -> int:
        if old_name == new_name:
            return 0
        if self.calendar_exists(new_name):
            raise CalendarExistsError(new_name)

        with self._session(f"renaming calendar '{old_name}'") as session:
            result = session.execute(
                update(CalendarRow)
                .where(CalendarRow.calendar_name == old_name)
                .values(calendar_name=new_name)
            )
            logger.info(f"Renamed calendar '{old_name}' to '{new_name}' ({result.rowcount} events)")
            return result.rowcount

    def list_calendars(self) -> List[Tuple[str, bool]]:
        """Every calendar name with its default flag, sorted by name"""
        with self._session("listing calendars") as session:
            rows = session.execute(
                select(CalendarRow.calendar_name, func.max(CalendarRow.is_default))
                .group_by(CalendarRow.calendar_name)
                .order_by(CalendarRow.calendar_name)
            ).all()
        return [(name, bool(flag)) for name, flag in rows]
