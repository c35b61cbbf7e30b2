"""Run options for synchronization and transfer.

Options are frozen dataclasses validated at construction: a run never starts
with a missing or inconsistent option.

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType

from transync.constants import (
    DEFAULT_ISSUANCE_STAGGER,
    DEFAULT_MAX_POLL_ATTEMPTS,
    DEFAULT_POLL_DELAY,
)
from transync.diagnostics import ConfigurationError
from transync.languages.types import PackagePath, ResourceName
from transync.sources import MessageExtractor, SourceMessage

__all__ = [
    "PollingPolicy",
    "SynchronizeOptions",
    "TransportOptions",
]


def _require(value: object, name: str) -> None:
    if not value:
        msg = f'Missing required option "{name}".'
        raise ConfigurationError(msg)


@dataclass(frozen=True, slots=True)
class PollingPolicy:
    """Timing of remote jobs.

    A job's effective timeout is max_poll_attempts * poll_delay.

    Attributes:
        poll_delay: Seconds between two polls of the same job
        max_poll_attempts: Attempt ceiling per job (also for download creation)
        issuance_stagger: Seconds between the issuance of consecutive requests
    """

    poll_delay: float = DEFAULT_POLL_DELAY
    max_poll_attempts: int = DEFAULT_MAX_POLL_ATTEMPTS
    issuance_stagger: float = DEFAULT_ISSUANCE_STAGGER

    def __post_init__(self) -> None:
        """Validate timing values.

        Raises:
            ConfigurationError: If a delay is negative or the ceiling is below 1
        """
        if self.poll_delay < 0 or self.issuance_stagger < 0:
            msg = (
                "poll_delay and issuance_stagger must not be negative, "
                f"got {self.poll_delay} and {self.issuance_stagger}"
            )
            raise ConfigurationError(msg)
        if self.max_poll_attempts < 1:
            msg = f"max_poll_attempts must be at least 1, got {self.max_poll_attempts}"
            raise ConfigurationError(msg)


@dataclass(frozen=True, slots=True)
class SynchronizeOptions:
    """Options of a synchronization run.

    Source messages are either extracted from source_files with an
    extractor, or passed in directly as source_messages (already extracted).

    Attributes:
        package_paths: Package roots whose documents are synchronized
        core_package_path: Package holding contexts shared by every package
        source_files: Source files to extract messages from
        extractor: Message extractor for source_files
        source_messages: Already extracted messages (alternative to extractor)
        ignore_unused_core_package_contexts: Do not report unused core contexts
        validate_only: Run the checks and compute changes without writing
        skip_license_header: Create new documents without the license banner
        root_dir: Directory relative paths are resolved against
            (default: current working directory)
    """

    package_paths: Sequence[PackagePath]
    core_package_path: PackagePath
    source_files: Sequence[str] = ()
    extractor: MessageExtractor | None = None
    source_messages: Sequence[SourceMessage] | None = None
    ignore_unused_core_package_contexts: bool = False
    validate_only: bool = False
    skip_license_header: bool = False
    root_dir: str | None = None

    def __post_init__(self) -> None:
        """Validate options.

        Raises:
            ConfigurationError: If a required option is missing or messages
                have no source
        """
        _require(self.core_package_path, "core_package_path")
        object.__setattr__(self, "package_paths", tuple(self.package_paths))
        object.__setattr__(self, "source_files", tuple(self.source_files))

        if (self.extractor is None) == (self.source_messages is None):
            msg = 'Exactly one of "extractor" and "source_messages" must be set.'
            raise ConfigurationError(msg)
        if self.source_messages is not None:
            object.__setattr__(self, "source_messages", tuple(self.source_messages))


@dataclass(frozen=True, slots=True)
class TransportOptions:
    """Options of a transfer run.

    Attributes:
        organization_name: Organization owning the project on the service
        project_name: Project on the service
        auth_token: API token
        packages: Resource name -> package path, for every package to transfer
        cwd: Working directory; package paths and failure records live here
        poll_delay: Seconds between two polls of the same job
        max_poll_attempts: Attempt ceiling per job
        issuance_stagger: Seconds between consecutive request issuances
        simplify_license_header: Omit the service URL from downloaded documents
    """

    organization_name: str
    project_name: str
    auth_token: str
    packages: Mapping[ResourceName, PackagePath]
    cwd: str
    poll_delay: float = DEFAULT_POLL_DELAY
    max_poll_attempts: int = DEFAULT_MAX_POLL_ATTEMPTS
    issuance_stagger: float = DEFAULT_ISSUANCE_STAGGER
    simplify_license_header: bool = False
    _polling: PollingPolicy = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Validate options.

        Raises:
            ConfigurationError: If a required option is missing or a timing
                value is invalid
        """
        for name in ("organization_name", "project_name", "auth_token", "packages", "cwd"):
            _require(getattr(self, name), name)
        object.__setattr__(self, "packages", MappingProxyType(dict(self.packages)))
        object.__setattr__(
            self,
            "_polling",
            PollingPolicy(
                poll_delay=self.poll_delay,
                max_poll_attempts=self.max_poll_attempts,
                issuance_stagger=self.issuance_stagger,
            ),
        )

    def __repr__(self) -> str:
        return (
            f"TransportOptions(organization_name={self.organization_name!r}, "
            f"project_name={self.project_name!r}, auth_token='***', "
            f"packages={len(self.packages)}, cwd={self.cwd!r})"
        )

    @property
    def polling(self) -> PollingPolicy:
        """Timing of remote jobs."""
        return self._polling
