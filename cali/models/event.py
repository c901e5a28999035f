from enum import Enum
from typing import Union
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from ..errors import InvalidIdentifierError


class Recurring(str, Enum):
    """Recurrence tag stored with an event. It is never expanded into dates."""
    NO = 'No'
    DAILY = 'Daily'
    WEEKLY = 'Weekly'
    MONTHLY = 'Monthly'
    YEARLY = 'Yearly'

    def __str__(self):
        return self.value

    @classmethod
    def from_text(cls, text) -> 'Recurring':
        """Decode stored text. Anything unrecognised falls back to NO."""
        if isinstance(text, cls):
            return text
        return _RECURRING_BY_TEXT.get(text, cls.NO)


_RECURRING_BY_TEXT = {member.value: member for member in Recurring}


class Event(BaseModel):
    """A single calendar event.

    Mutations only change this object, the caller must hand the event back
    to its calendar for the stored row to change.
    """
    id: UUID = Field(default_factory=uuid4)
    name: str
    start: str
    end: str
    recurring: Recurring = Recurring.NO

    @classmethod
    def create_new(cls, name: str, start: str, end: str,
                   recurring: Recurring = Recurring.NO) -> 'Event':
        return cls(id=uuid4(), name=name, start=start, end=end,
                   recurring=Recurring.from_text(recurring))

    @classmethod
    def reconstruct(cls, id: str, name: str, start: str, end: str,
                    recurring: Union[Recurring, str]) -> 'Event':
        """Rebuild an event from its stored text form"""
        try:
            event_id = UUID(str(id))
        except ValueError as e:
            raise InvalidIdentifierError(id) from e

        return cls(id=event_id, name=name, start=start, end=end,
                   recurring=Recurring.from_text(recurring))

    def update_name(self, new_name: str):
        self.name = new_name

    def update_start(self, new_start: str):
        self.start = new_start

    def update_end(self, new_end: str):
        self.end = new_end
