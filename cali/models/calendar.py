from typing import List
import logging

from ..errors import CalendarExistsError
from ..services.calendar_store import CalendarStore
from .event import Event

logger = logging.getLogger(__name__)


class Calendar:
    """A named group of events stored in one calendar database.

    Use `Calendar.create_new` or `Calendar.load_or_create` rather than the
    constructor; they check the stored rows to decide the default flag.
    """

    def __init__(self, name: str, default: bool, store: CalendarStore):
        self._name = name
        self._default = default
        self._store = store

    @classmethod
    def create_new(cls, name: str, location) -> 'Calendar':
        store = CalendarStore(location)
        store.initialize()
        if store.calendar_exists(name):
            raise CalendarExistsError(name)

        default = store.get_default_name() is None
        logger.info(f"Created calendar '{name}' (default={default})")
        return cls(name, default, store)

    @classmethod
    def load_or_create(cls, name: str, location) -> 'Calendar':
        store = CalendarStore(location)
        store.initialize()
        if store.calendar_exists(name):
            return cls(name, store.is_default(name), store)
        return cls.create_new(name, store.db)

    @property
    def name(self) -> str:
        return self._name

    @property
    def default(self) -> bool:
        return self._default

    @property
    def location(self) -> str:
        return self._store.location

    def add_event(self, event: Event):
        self._store.insert_event(self._name, self._default, event)

    def update_event(self, event: Event):
        self._store.update_event(self, event)

    def remove_event(self, event: Event):
        self._store.delete_event(self._name, event.id)

    def find_events(self, query: str, exact: bool = False) -> List[Event]:
        return self._store.find_events(self._name, query, exact)

    def rename(self, new_name: str):
        """Rename the calendar and every event row stored under it"""
        new_name = new_name.strip()
        if not new_name:
            raise ValueError("Calendar name cannot be empty")
        self._store.rename_calendar(self._name, new_name)
        self._name = new_name

    def has_events(self) -> bool:
        """Whether any row is stored under this calendar's name"""
        return self._store.calendar_exists(self._name)

    def set_default(self):
        self._store.set_default(self._name)
        self._default = True

    def delete(self):
        self._store.delete_calendar(self._name)

    def __repr__(self):
        return f"Calendar(name={self._name!r}, default={self._default}, location={self.location!r})"
