class CaliError(Exception):
    """Base class for every error the command line reports"""


class CalendarExistsError(CaliError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Calendar '{name}' already exists.")


class AmbiguousDefaultError(CaliError):
    """More than one calendar is flagged as the default"""

    def __init__(self, names):
        self.names = list(names)
        super().__init__(
            f"Multiple default calendars found: {', '.join(self.names)}"
        )


class StorageIoError(CaliError):
    """Failure opening, preparing or executing against the calendar database"""


class StorageUnavailableError(StorageIoError):
    """The calendar database could not be opened or created"""


class InvalidIdentifierError(CaliError):
    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid event identifier: '{value}'")


class EventNotFoundError(CaliError):
    pass
