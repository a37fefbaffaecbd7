"""Domain-level exceptions.

Every failure a command can report is a subclass of DomainException so the
dispatcher can catch them uniformly, print the message and pick an exit
status.  Backend messages are carried verbatim in ``str(exc)``.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """The backend rejected a payload."""


class EntityNotFoundError(DomainException):
    """A requested form, field, notification or entry does not exist."""


class ConflictingIdError(DomainException):
    """A record with the requested ID already exists."""


class InvalidJsonError(DomainException):
    """A JSON blob could not be decoded or decoded to nothing."""


class InvalidSpecError(DomainException):
    """A column specification is malformed (duplicate keys)."""


class NotWritableError(DomainException):
    """An export target directory cannot be written to."""


class BackendUnavailableError(DomainException):
    """The forms backend is not installed."""


class BackendVersionTooLowError(DomainException):
    """The installed forms backend is older than the minimum supported."""


class RemoteServiceError(DomainException):
    """The update/license server could not be reached or answered badly."""


# --- Usage errors ------------------------------------------------------------
# Raised by the dispatcher before any backend call is made.


class UsageError(DomainException):
    """The command line itself is wrong."""


class MissingArgumentError(UsageError):
    """A required positional argument was not supplied."""

    def __init__(self, slot: str) -> None:
        super().__init__(f"Missing required argument: <{slot}>")
        self.slot = slot


class InvalidArgumentError(UsageError):
    """An argument or option has an unacceptable value."""


class UnsupportedFormatError(UsageError):
    """The requested --format is not one the command can render."""

    def __init__(self, fmt: str, accepted: list[str]) -> None:
        super().__init__(
            f"Invalid format '{fmt}'. Accepted values: {', '.join(accepted)}"
        )
        self.format = fmt
        self.accepted = accepted
