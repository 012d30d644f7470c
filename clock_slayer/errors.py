"""Error taxonomy shared by the store, the report pipeline and the API."""


class ClockSlayerError(Exception):
    """Base class for application errors."""


class StoreUnavailable(ClockSlayerError):
    """The record store could not be reached or a query failed."""


class DeliveryFailure(ClockSlayerError):
    """The delivery channel rejected the report or could not be reached."""


class ValidationFailure(ClockSlayerError, ValueError):
    """A write carried malformed or conflicting input."""


class ReportAlreadyRunning(ClockSlayerError):
    """A report pipeline run is already in progress."""
