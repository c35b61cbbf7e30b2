"""Remote jobs and the results of running them.

A RemoteJob moves through an explicit lifecycle:

    PENDING -> PROCESSING(attempt 1) -> PROCESSING(attempt n) -> SUCCEEDED | FAILED

The attempt counter belongs to the single asyncio task that drives the job;
no two tasks ever poll the same job.

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from transync.enums import FailureReason, JobKind, JobStatus, TransferDirection
from transync.languages.types import LanguageCode, ResourceName

__all__ = [
    "FailureDescriptor",
    "RemoteJob",
    "TransferResult",
    "TransferSummary",
    "UploadDetails",
]


@dataclass(slots=True)
class RemoteJob:
    """One asynchronous upload or download on the translation service.

    Attributes:
        kind: Upload or download
        resource_name: Resource (package) the job belongs to
        language_code: Language of a download job, None for uploads
        id: Job id (upload) or poll URL (download) assigned at creation
        status: Current lifecycle state
        attempts: Number of polls made so far
    """

    kind: JobKind
    resource_name: ResourceName
    language_code: LanguageCode | None = None
    id: str | None = None
    status: JobStatus = JobStatus.PENDING
    attempts: int = 0

    def start(self, job_id: str) -> None:
        """Record the id assigned by the service when the job was created."""
        if self.status is not JobStatus.PENDING:
            msg = f"Cannot start a job in state {self.status}"
            raise RuntimeError(msg)
        self.id = job_id

    def begin_attempt(self) -> int:
        """Enter the next poll attempt and return its number (1-based)."""
        if self.status.is_terminal:
            msg = f"Cannot poll a job in state {self.status}"
            raise RuntimeError(msg)
        if self.id is None:
            msg = "Cannot poll a job that was not created"
            raise RuntimeError(msg)
        self.status = JobStatus.PROCESSING
        self.attempts += 1
        return self.attempts

    def is_exhausted(self, max_attempts: int) -> bool:
        """True when no poll attempt is left."""
        return self.attempts >= max_attempts

    def succeed(self) -> None:
        """Mark the job as finished successfully."""
        self.status = JobStatus.SUCCEEDED

    def fail(self) -> None:
        """Mark the job as finished without a result."""
        self.status = JobStatus.FAILED


@dataclass(frozen=True, slots=True)
class FailureDescriptor:
    """Why one job did not produce a result.

    Attributes:
        resource_name: Resource of the failed job
        language_code: Language of a failed download, None for uploads
        reason: Failure category
        error_message: Human-readable message
        details: Error details reported by the service, if any
    """

    resource_name: ResourceName
    language_code: LanguageCode | None
    reason: FailureReason
    error_message: str
    details: tuple[str, ...] = ()

    def format(self) -> str:
        """Format failure for a report line."""
        target = self.resource_name
        if self.language_code:
            target += f"/{self.language_code}"
        return f"{target}: {self.error_message}"


@dataclass(frozen=True, slots=True)
class UploadDetails:
    """Outcome of a finished upload, as reported by the service.

    Attributes:
        strings_created: Number of new source strings
        strings_updated: Number of changed source strings
        strings_deleted: Number of removed source strings
        is_new: True when the resource was created by this upload
    """

    strings_created: int = 0
    strings_updated: int = 0
    strings_deleted: int = 0
    is_new: bool = False

    @property
    def changes(self) -> int:
        """Total number of changed strings."""
        return self.strings_created + self.strings_updated + self.strings_deleted


@dataclass(frozen=True, slots=True)
class TransferResult[T]:
    """Successes and failures of a batch of jobs.

    The two collections are disjoint: every job ends up in exactly one.

    Attributes:
        succeeded: Result per key (language code for downloads, resource
            name for uploads)
        failed: One descriptor per job that did not succeed, creation
            failures included
    """

    succeeded: Mapping[str, T] = field(default_factory=dict)
    failed: tuple[FailureDescriptor, ...] = ()

    def __post_init__(self) -> None:
        """Freeze the succeeded mapping."""
        object.__setattr__(self, "succeeded", MappingProxyType(dict(self.succeeded)))

    @property
    def is_complete(self) -> bool:
        """True when every job succeeded."""
        return not self.failed

    @property
    def is_total_failure(self) -> bool:
        """True when jobs were run and none of them succeeded."""
        return bool(self.failed) and not self.succeeded

    @property
    def job_count(self) -> int:
        """Number of jobs the result covers."""
        return len(self.succeeded) + len(self.failed)

    def for_resource(self, resource_name: ResourceName) -> TransferResult[T]:
        """Restrict an upload result (keyed by resource) to one resource."""
        return TransferResult(
            succeeded={k: v for k, v in self.succeeded.items() if k == resource_name},
            failed=tuple(f for f in self.failed if f.resource_name == resource_name),
        )


@dataclass(frozen=True, slots=True)
class TransferSummary:
    """Per-resource results of one transfer run.

    Attributes:
        direction: Upload or download
        results: Result per resource, in processing order
        is_rerun: True when only previously failed jobs were processed
    """

    direction: TransferDirection
    results: Mapping[ResourceName, TransferResult[object]] = field(default_factory=dict)
    is_rerun: bool = False

    def __post_init__(self) -> None:
        """Freeze the results mapping."""
        object.__setattr__(self, "results", MappingProxyType(dict(self.results)))

    def __repr__(self) -> str:
        return (
            f"TransferSummary(direction={self.direction!s}, resources={len(self.results)}, "
            f"succeeded={self.succeeded_count}, failed={len(self.failed)})"
        )

    @property
    def failed(self) -> tuple[FailureDescriptor, ...]:
        """All failures, resource by resource."""
        return tuple(f for result in self.results.values() for f in result.failed)

    @property
    def succeeded_count(self) -> int:
        """Number of successful jobs across all resources."""
        return sum(len(result.succeeded) for result in self.results.values())

    @property
    def is_complete(self) -> bool:
        """True when every job of every resource succeeded."""
        return all(result.is_complete for result in self.results.values())

    @property
    def is_total_failure(self) -> bool:
        """True when jobs failed and not a single one succeeded."""
        return bool(self.failed) and self.succeeded_count == 0

    def get(self, resource_name: ResourceName) -> TransferResult[object] | None:
        """Get the result of one resource."""
        return self.results.get(resource_name)
