from sqlalchemy import Column, Integer, Text
from .base import Base


class CalendarRow(Base):
    """One event owned by one calendar.

    The table has no calendars relation of its own: a calendar exists only
    as long as at least one row carries its name. The table is created
    without a primary key constraint, event_id is the mapper identity only.
    """
    __tablename__ = 'calendars'

    event_id = Column(Text)
    calendar_name = Column(Text, nullable=False)
    event_name = Column(Text, nullable=False)
    event_start = Column(Text, nullable=False)
    event_end = Column(Text, nullable=False)
    event_recurring = Column(Text, nullable=False)
    is_default = Column(Integer, nullable=False, default=0)

    __mapper_args__ = {'primary_key': [event_id]}

    def to_dict(self):
        return {
            'event_id': self.event_id,
            'calendar_name': self.calendar_name,
            'event_name': self.event_name,
            'event_start': self.event_start,
            'event_end': self.event_end,
            'event_recurring': self.event_recurring,
            'is_default': bool(self.is_default)
        }
