class EspControlError(Exception):
    """Base class for all pyespcontrol errors."""


class TransportFailure(EspControlError):
    """The device could not be reached or returned nothing usable.

    Raised for network errors, request timeouts and response bodies that
    cannot be parsed. Only this family of errors affects connection state.
    """

    def __init__(self, message: str, url: str = None):
        super().__init__(message)
        self.url = url


class HTTPStatusFailure(TransportFailure):
    """The device answered with a non-2xx HTTP status.

    Treated like any other transport failure: the device is not usable.
    """

    def __init__(self, message: str, status_code: int, url: str = None):
        super().__init__(message, url)
        self.status_code = status_code


class ApplicationFailure(EspControlError):
    """A well-formed response whose payload reports the operation failed."""

    def __init__(self, message: str, payload: dict = None):
        super().__init__(message)
        self.payload = payload or {}


class AssetLoadFailure(EspControlError):
    """A feature module's markup or code unit could not be loaded."""

    def __init__(self, module, message: str):
        super().__init__(message)
        self.module = module


class InvalidModuleName(EspControlError, ValueError):
    """Name does not belong to the fixed set of feature modules."""
