"""Concurrent upload and download jobs against the translation service.

Both flows follow the same shape: create a job, poll it until it reaches a
terminal state, collect the outcome. Jobs run concurrently under
asyncio.gather; each job catches its own failures and turns them into a
FailureDescriptor, so one failed job never cancels its siblings and a batch
always runs to completion.

Request issuance is staggered (job N starts N * issuance_stagger seconds
after job 0): several dozen simultaneous requests can exhaust the operating
system's network stack.

Python 3.13+.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass

from transync.config import PollingPolicy
from transync.constants import BASE_LANGUAGE_CODE
from transync.diagnostics import TransportError
from transync.enums import FailureReason, JobKind, JobStatus
from transync.languages.types import LanguageCode, ResourceName
from transync.transport.client import TransportClient
from transync.transport.jobs import (
    FailureDescriptor,
    RemoteJob,
    TransferResult,
    UploadDetails,
)

__all__ = [
    "CREATE_DOWNLOAD_FAILED_MESSAGE",
    "DOWNLOAD_LIMIT_REACHED_MESSAGE",
    "TransportOrchestrator",
    "UPLOAD_LIMIT_REACHED_MESSAGE",
    "UploadSource",
]

logger = logging.getLogger(__name__)

CREATE_DOWNLOAD_FAILED_MESSAGE = "Failed to create download request."
UPLOAD_LIMIT_REACHED_MESSAGE = "Failed to retrieve the upload details."
DOWNLOAD_LIMIT_REACHED_MESSAGE = (
    "Failed to download the translation file. "
    "Requested file is not ready yet, but the limit of file download attempts has been reached."
)


@dataclass(frozen=True, slots=True)
class UploadSource:
    """Source document to publish as a resource.

    Attributes:
        content: Serialized base-language document
        is_new: True when the resource does not exist on the service yet
    """

    content: str
    is_new: bool = False


class _JobFailedError(Exception):
    """Terminal failure of one job; never leaves the orchestrator."""

    def __init__(
        self, reason: FailureReason, message: str, details: tuple[str, ...] = ()
    ) -> None:
        super().__init__(message)
        self.reason = reason
        self.message = message
        self.details = details


def _describe(job: RemoteJob, error: _JobFailedError) -> FailureDescriptor:
    return FailureDescriptor(
        resource_name=job.resource_name,
        language_code=job.language_code,
        reason=error.reason,
        error_message=error.message,
        details=error.details,
    )


class TransportOrchestrator:
    """Runs batches of remote jobs and aggregates their outcomes.

    Example:
        >>> orchestrator = TransportOrchestrator(client, PollingPolicy())
        >>> result = await orchestrator.download("core", ["pl", "de"])
        >>> sorted(result.succeeded)
        ['de', 'en', 'pl']
        >>> result.failed
        ()
    """

    __slots__ = ("_client", "_policy")

    def __init__(self, client: TransportClient, policy: PollingPolicy | None = None) -> None:
        """Initialize orchestrator.

        Args:
            client: Translation service client
            policy: Polling delays and attempt ceiling (default: PollingPolicy())
        """
        self._client = client
        self._policy = policy if policy is not None else PollingPolicy()

    @property
    def policy(self) -> PollingPolicy:
        """Timing used for every job."""
        return self._policy

    # ------------------------------------------------------------------
    # Upload
    # ------------------------------------------------------------------

    async def _create_upload(
        self, job: RemoteJob, source: UploadSource
    ) -> str | FailureDescriptor:
        try:
            if source.is_new:
                await self._client.create_resource(job.resource_name)
            job_id = await self._client.create_upload_job(job.resource_name, source.content)
        except TransportError as e:
            job.fail()
            logger.warning("Cannot upload %s: %s", job.resource_name, e)
            return _describe(
                job, _JobFailedError(FailureReason.CREATE_FAILED, str(e), e.details)
            )
        job.start(job_id)
        return job_id

    async def _poll_upload(self, job: RemoteJob, job_id: str) -> UploadDetails:
        while True:
            attempt = job.begin_attempt()
            try:
                status = await self._client.get_upload_status(job_id)
            except TransportError as e:
                job.fail()
                raise _JobFailedError(FailureReason.UPLOAD_FAILED, str(e), e.details) from e

            if status.status is JobStatus.SUCCEEDED:
                job.succeed()
                return status.details if status.details is not None else UploadDetails()

            if status.status is JobStatus.FAILED:
                job.fail()
                message = "; ".join(status.errors) or "The service rejected the upload."
                raise _JobFailedError(FailureReason.UPLOAD_FAILED, message, status.errors)

            if job.is_exhausted(self._policy.max_poll_attempts):
                job.fail()
                raise _JobFailedError(
                    FailureReason.RETRY_LIMIT_REACHED, UPLOAD_LIMIT_REACHED_MESSAGE
                )

            logger.debug(
                "Upload of %s is %s (attempt %d)", job.resource_name, status.status, attempt
            )
            await asyncio.sleep(self._policy.poll_delay)

    async def _run_upload_poll(
        self, job: RemoteJob, job_id: str
    ) -> tuple[RemoteJob, UploadDetails | FailureDescriptor]:
        try:
            return job, await self._poll_upload(job, job_id)
        except _JobFailedError as e:
            logger.warning("Upload of %s failed: %s", job.resource_name, e.message)
            return job, _describe(job, e)

    async def upload(
        self, resources: Mapping[ResourceName, UploadSource]
    ) -> TransferResult[UploadDetails]:
        """Publish source documents and wait for the service to process them.

        Resources are created (when new) and their upload jobs submitted one
        after another; the jobs are then polled concurrently.

        Args:
            resources: Source document per resource name

        Returns:
            Upload details per resource name, and one failure per resource
            that could not be created, submitted or processed
        """
        failed: list[FailureDescriptor] = []
        created: list[tuple[RemoteJob, str]] = []
        for resource_name, source in resources.items():
            job = RemoteJob(kind=JobKind.UPLOAD, resource_name=resource_name)
            outcome = await self._create_upload(job, source)
            if isinstance(outcome, FailureDescriptor):
                failed.append(outcome)
            else:
                created.append((job, outcome))

        outcomes = await asyncio.gather(
            *(self._run_upload_poll(job, job_id) for job, job_id in created)
        )

        succeeded: dict[ResourceName, UploadDetails] = {}
        for job, outcome in outcomes:
            if isinstance(outcome, FailureDescriptor):
                failed.append(outcome)
                continue
            source = resources[job.resource_name]
            succeeded[job.resource_name] = UploadDetails(
                strings_created=outcome.strings_created,
                strings_updated=outcome.strings_updated,
                strings_deleted=outcome.strings_deleted,
                is_new=source.is_new,
            )

        return TransferResult(succeeded=succeeded, failed=tuple(failed))

    # ------------------------------------------------------------------
    # Download
    # ------------------------------------------------------------------

    async def _create_download(self, job: RemoteJob, language_code: LanguageCode) -> str:
        for attempt in range(1, self._policy.max_poll_attempts + 1):
            try:
                url = await self._client.create_download_job(job.resource_name, language_code)
            except TransportError as e:
                logger.debug(
                    "Cannot create download of %s/%s (attempt %d): %s",
                    job.resource_name,
                    language_code,
                    attempt,
                    e,
                )
            else:
                job.start(url)
                return url
            if attempt < self._policy.max_poll_attempts:
                await asyncio.sleep(self._policy.poll_delay)

        job.fail()
        raise _JobFailedError(FailureReason.CREATE_FAILED, CREATE_DOWNLOAD_FAILED_MESSAGE)

    async def _poll_download(self, job: RemoteJob, url: str) -> str:
        while True:
            attempt = job.begin_attempt()
            try:
                response = await self._client.fetch(url)
            except TransportError as e:
                job.fail()
                message = f"Failed to download the translation file. {e}"
                raise _JobFailedError(FailureReason.DOWNLOAD_FAILED, message) from e

            if response.ok and response.redirected:
                job.succeed()
                return response.body

            if not response.ok:
                job.fail()
                message = (
                    "Failed to download the translation file. "
                    f"Received response: {response.status} {response.reason}"
                )
                raise _JobFailedError(FailureReason.DOWNLOAD_FAILED, message)

            if job.is_exhausted(self._policy.max_poll_attempts):
                job.fail()
                raise _JobFailedError(
                    FailureReason.RETRY_LIMIT_REACHED, DOWNLOAD_LIMIT_REACHED_MESSAGE
                )

            logger.debug(
                "Translation %s/%s not ready (attempt %d)",
                job.resource_name,
                job.language_code,
                attempt,
            )
            await asyncio.sleep(self._policy.poll_delay)

    async def _run_download(
        self, job: RemoteJob, language_code: LanguageCode, index: int
    ) -> str | FailureDescriptor:
        await asyncio.sleep(self._policy.issuance_stagger * index)
        try:
            url = await self._create_download(job, language_code)
            return await self._poll_download(job, url)
        except _JobFailedError as e:
            logger.warning(
                "Download of %s/%s failed: %s", job.resource_name, language_code, e.message
            )
            return _describe(job, e)

    async def download(
        self,
        resource_name: ResourceName,
        language_codes: list[LanguageCode] | tuple[LanguageCode, ...],
    ) -> TransferResult[str]:
        """Download the translations of a resource.

        The base language is always included: its document holds the
        source strings.

        Args:
            resource_name: Resource to download
            language_codes: Languages to download (service codes)

        Returns:
            Document content per language code, and one failure per language
            whose download could not be created or completed
        """
        codes = list(dict.fromkeys((BASE_LANGUAGE_CODE, *language_codes)))
        jobs = [
            RemoteJob(kind=JobKind.DOWNLOAD, resource_name=resource_name, language_code=code)
            for code in codes
        ]
        outcomes = await asyncio.gather(
            *(
                self._run_download(job, code, index)
                for index, (job, code) in enumerate(zip(jobs, codes, strict=True))
            )
        )

        succeeded: dict[LanguageCode, str] = {}
        failed: list[FailureDescriptor] = []
        for code, outcome in zip(codes, outcomes, strict=True):
            if isinstance(outcome, FailureDescriptor):
                failed.append(outcome)
            else:
                succeeded[code] = outcome

        return TransferResult(succeeded=succeeded, failed=tuple(failed))
