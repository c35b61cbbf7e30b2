"""Client side of the translation service API.

TransportClient is the protocol the orchestrator talks to; TransifexClient
implements it for the Transifex REST API v3 (JSON:API) on top of aiohttp.

Every failed request surfaces as TransportError, and so does every
successful response whose content the client cannot decode. The
orchestrator decides what a failure means for the job that made the request.

Python 3.13+. Depends on aiohttp.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from types import TracebackType
from typing import Any, Protocol, Self

import aiohttp

from transync.constants import BASE_LANGUAGE_CODE, TRANSIFEX_API_URL
from transync.diagnostics import TransportError
from transync.enums import JobStatus
from transync.languages.types import LanguageCode, ResourceName
from transync.transport.jobs import UploadDetails

__all__ = [
    "FetchResponse",
    "ProjectData",
    "TransifexClient",
    "TransportClient",
    "UploadStatus",
]

logger = logging.getLogger(__name__)

_JSON_API_CONTENT_TYPE = "application/vnd.api+json"

# Seconds before a single request is abandoned.
_REQUEST_TIMEOUT: float = 60.0


@dataclass(frozen=True, slots=True)
class ProjectData:
    """Resources and languages of a project on the service.

    Attributes:
        resource_names: Resources present on the service, restricted to the
            ones the caller asked about
        language_codes: Project languages, base language first
    """

    resource_names: tuple[ResourceName, ...]
    language_codes: tuple[LanguageCode, ...]


@dataclass(frozen=True, slots=True)
class UploadStatus:
    """State of an upload job.

    Attributes:
        status: Job state reported by the service
        details: String counts, set once the job succeeded
        errors: Error details, set when the job failed
    """

    status: JobStatus
    details: UploadDetails | None = None
    errors: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class FetchResponse:
    """Response to a download poll.

    Attributes:
        ok: True for a 2xx status
        redirected: True when the final response came after a redirect,
            which is how the service signals that the file is ready
        status: HTTP status code
        reason: HTTP reason phrase
        body: Response text
    """

    ok: bool
    redirected: bool
    status: int
    reason: str
    body: str


class TransportClient(Protocol):
    """Operations the orchestrator needs from the translation service.

    Every operation reports a failed request or an undecodable response by
    raising TransportError.
    """

    async def get_project_data(self, resource_names: Iterable[ResourceName]) -> ProjectData:
        """Get the project's existing resources (among resource_names) and languages."""

    async def create_resource(self, resource_name: ResourceName) -> None:
        """Create a new resource for PO documents."""

    async def create_upload_job(self, resource_name: ResourceName, content: str) -> str:
        """Submit new source strings for a resource and return the job id."""

    async def get_upload_status(self, job_id: str) -> UploadStatus:
        """Get the state of an upload job."""

    async def create_download_job(
        self, resource_name: ResourceName, language_code: LanguageCode
    ) -> str:
        """Request a translation file and return the URL to poll for it."""

    async def fetch(self, url: str) -> FetchResponse:
        """Poll a download URL."""


def _error_details(payload: Any) -> tuple[str, ...]:
    if not isinstance(payload, dict):
        return ()
    errors = payload.get("errors") or ()
    return tuple(
        str(error.get("detail") or error.get("title") or "")
        for error in errors
        if isinstance(error, dict)
    )


# Raised while reading an unexpected response body.
_DECODING_ERRORS = (KeyError, TypeError, ValueError)


def _unexpected_response(url: str, error: Exception) -> TransportError:
    msg = f"Unexpected response from {url}: {error!r}"
    return TransportError(msg)


class TransifexClient:
    """TransportClient for the Transifex REST API v3.

    Use as an async context manager; the HTTP session lives as long as the
    context. The auth token is sent with every request and never changes
    after construction.

    Example:
        >>> async with TransifexClient("acme", "editor", token) as client:
        ...     project = await client.get_project_data(["core", "table"])
    """

    __slots__ = ("_auth_token", "_base_url", "_organization_name", "_project_name", "_session")

    def __init__(
        self,
        organization_name: str,
        project_name: str,
        auth_token: str,
        *,
        base_url: str = TRANSIFEX_API_URL,
    ) -> None:
        """Initialize client.

        Args:
            organization_name: Organization slug
            project_name: Project slug
            auth_token: API token
            base_url: API root (overridable for testing)
        """
        self._organization_name = organization_name
        self._project_name = project_name
        self._auth_token = auth_token
        self._base_url = base_url.rstrip("/")
        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> Self:
        self._session = aiohttp.ClientSession(
            headers={
                "Authorization": f"Bearer {self._auth_token}",
                "Accept": _JSON_API_CONTENT_TYPE,
                "Content-Type": _JSON_API_CONTENT_TYPE,
            },
            timeout=aiohttp.ClientTimeout(total=_REQUEST_TIMEOUT),
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None

    # ------------------------------------------------------------------
    # Identifiers
    # ------------------------------------------------------------------

    @property
    def project_id(self) -> str:
        """JSON:API id of the project."""
        return f"o:{self._organization_name}:p:{self._project_name}"

    def resource_id(self, resource_name: ResourceName) -> str:
        """JSON:API id of a resource."""
        return f"{self.project_id}:r:{resource_name}"

    @staticmethod
    def language_id(language_code: LanguageCode) -> str:
        """JSON:API id of a language."""
        return f"l:{language_code}"

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    def _url(self, path: str) -> str:
        return f"{self._base_url}/{path.lstrip('/')}"

    def _require_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            msg = "TransifexClient must be used as an async context manager"
            raise RuntimeError(msg)
        return self._session

    async def _request(
        self,
        method: str,
        url: str,
        *,
        payload: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        session = self._require_session()
        data = json.dumps(payload) if payload is not None else None
        logger.debug("%s %s", method, url)
        try:
            async with session.request(method, url, data=data, params=params) as response:
                status = response.status
                reason = response.reason
                text = await response.text()
        except aiohttp.ClientError as e:
            msg = f"Request to {url} failed: {e}"
            raise TransportError(msg) from e
        except TimeoutError as e:
            msg = f"Request to {url} timed out"
            raise TransportError(msg) from e

        try:
            body = json.loads(text) if text.strip() else None
        except json.JSONDecodeError as e:
            if status >= 400:
                body = None
            else:
                msg = f"Invalid JSON in response from {url}"
                raise TransportError(msg, status=status) from e

        if status >= 400:
            details = _error_details(body)
            message = "; ".join(d for d in details if d) or f"Request failed: {status} {reason}"
            raise TransportError(message, status=status, details=details)
        return body if isinstance(body, dict) else {}

    async def _collect(self, path: str, params: dict[str, str] | None = None) -> list[dict[str, Any]]:
        """Get every item of a paginated collection."""
        items: list[dict[str, Any]] = []
        url: str | None = self._url(path)
        while url is not None:
            page = await self._request("GET", url, params=params)
            items.extend(page.get("data") or [])
            url = (page.get("links") or {}).get("next")
            # The next link already carries the query string.
            params = None
        return items

    # ------------------------------------------------------------------
    # TransportClient
    # ------------------------------------------------------------------

    async def get_project_data(self, resource_names: Iterable[ResourceName]) -> ProjectData:
        wanted = set(resource_names)
        resources = await self._collect("resources", params={"filter[project]": self.project_id})
        languages = await self._collect(f"projects/{self.project_id}/languages")

        try:
            found = tuple(
                resource["attributes"]["slug"]
                for resource in resources
                if resource["attributes"]["slug"] in wanted
            )
            codes = [language["attributes"]["code"] for language in languages]
        except _DECODING_ERRORS as e:
            raise _unexpected_response(self._url("resources"), e) from e
        return ProjectData(
            resource_names=found,
            language_codes=(BASE_LANGUAGE_CODE, *(c for c in codes if c != BASE_LANGUAGE_CODE)),
        )

    async def create_resource(self, resource_name: ResourceName) -> None:
        await self._request(
            "POST",
            self._url("resources"),
            payload={
                "data": {
                    "type": "resources",
                    "attributes": {"name": resource_name, "slug": resource_name},
                    "relationships": {
                        "i18n_format": {"data": {"type": "i18n_formats", "id": "PO"}},
                        "project": {"data": {"type": "projects", "id": self.project_id}},
                    },
                }
            },
        )
        logger.info("Created resource %s", resource_name)

    async def create_upload_job(self, resource_name: ResourceName, content: str) -> str:
        url = self._url("resource_strings_async_uploads")
        response = await self._request(
            "POST",
            url,
            payload={
                "data": {
                    "type": "resource_strings_async_uploads",
                    "attributes": {"content": content, "content_encoding": "text"},
                    "relationships": {
                        "resource": {
                            "data": {"type": "resources", "id": self.resource_id(resource_name)}
                        }
                    },
                }
            },
        )
        try:
            return str(response["data"]["id"])
        except _DECODING_ERRORS as e:
            raise _unexpected_response(url, e) from e

    async def get_upload_status(self, job_id: str) -> UploadStatus:
        url = self._url(f"resource_strings_async_uploads/{job_id}")
        response = await self._request("GET", url)
        try:
            attributes = response["data"]["attributes"]
            status = JobStatus(attributes["status"])

            details = None
            if status is JobStatus.SUCCEEDED:
                counts = attributes.get("details") or {}
                details = UploadDetails(
                    strings_created=int(counts.get("strings_created", 0)),
                    strings_updated=int(counts.get("strings_updated", 0)),
                    strings_deleted=int(counts.get("strings_deleted", 0)),
                )
            return UploadStatus(
                status=status,
                details=details,
                errors=_error_details(attributes),
            )
        except _DECODING_ERRORS as e:
            raise _unexpected_response(url, e) from e

    async def create_download_job(
        self, resource_name: ResourceName, language_code: LanguageCode
    ) -> str:
        relationships: dict[str, Any] = {
            "resource": {"data": {"type": "resources", "id": self.resource_id(resource_name)}}
        }
        if language_code == BASE_LANGUAGE_CODE:
            job_type = "resource_strings_async_downloads"
        else:
            job_type = "resource_translations_async_downloads"
            relationships["language"] = {
                "data": {"type": "languages", "id": self.language_id(language_code)}
            }

        url = self._url(job_type)
        response = await self._request(
            "POST",
            url,
            payload={
                "data": {
                    "type": job_type,
                    "attributes": {
                        "callback_url": None,
                        "content_encoding": "text",
                        "file_type": "default",
                        "pseudo": False,
                    },
                    "relationships": relationships,
                }
            },
        )
        try:
            return str(response["data"]["links"]["self"])
        except _DECODING_ERRORS as e:
            raise _unexpected_response(url, e) from e

    async def fetch(self, url: str) -> FetchResponse:
        session = self._require_session()
        logger.debug("GET %s", url)
        try:
            async with session.get(url, allow_redirects=True) as response:
                return FetchResponse(
                    ok=response.ok,
                    redirected=bool(response.history),
                    status=response.status,
                    reason=response.reason or "",
                    body=await response.text(),
                )
        except aiohttp.ClientError as e:
            msg = f"Request to {url} failed: {e}"
            raise TransportError(msg) from e
        except TimeoutError as e:
            msg = f"Request to {url} timed out"
            raise TransportError(msg) from e
