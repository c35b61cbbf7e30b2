"""transync exception hierarchy.

Exceptions cover the failures that stop a run: bad configuration, unreadable
documents and transport problems. Consistency problems between contexts and
source messages are not exceptions; they are reported as ContextError values
(see diagnostics.validation).

Python 3.13+.
"""


class TransyncError(Exception):
    """Base exception for all transync errors."""


class ConfigurationError(TransyncError):
    """Missing or invalid option.

    Raised at construction time of option objects so that a run never starts
    with an incomplete configuration.
    """


class UnknownLanguageError(ConfigurationError):
    """Locale code not present in the language catalogue.

    Attributes:
        locale_code: The locale that could not be resolved
    """

    def __init__(self, locale_code: str, source: str | None = None) -> None:
        """Initialize UnknownLanguageError.

        Args:
            locale_code: The locale that could not be resolved
            source: Optional description of where the locale was found
        """
        message = f'Unknown language "{locale_code}"'
        if source:
            message += f' declared in "{source}"'
        super().__init__(message + ".")
        self.locale_code = locale_code


class DocumentError(TransyncError):
    """Unreadable or corrupt translation document or context file.

    Fatal for the current run. Documents are never reset to a blank state
    when they cannot be parsed.

    Attributes:
        path: Path of the offending file
    """

    def __init__(self, message: str, *, path: str) -> None:
        """Initialize DocumentError.

        Args:
            message: Error message
            path: Path of the offending file
        """
        super().__init__(f'{message} ("{path}")')
        self.path = path


class TransportError(TransyncError):
    """Failure of a single request to the translation service.

    Caught at the job boundary by the transport orchestrator and converted
    into a failure descriptor; never aborts sibling jobs.

    Attributes:
        status: HTTP status code, or None for network-level failures
        details: Error details reported by the service (may be empty)
    """

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        details: tuple[str, ...] = (),
    ) -> None:
        """Initialize TransportError.

        Args:
            message: Error message
            status: HTTP status code, or None for network-level failures
            details: Error details reported by the service
        """
        super().__init__(message)
        self.status = status
        self.details = details
