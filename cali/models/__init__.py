from .event import Event, Recurring

__all__ = ['Event', 'Recurring']
