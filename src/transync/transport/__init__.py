"""Remote transport of translation documents.

Submodules:
    jobs         - RemoteJob, FailureDescriptor, TransferResult, TransferSummary
    client       - TransportClient protocol, TransifexClient (aiohttp)
    orchestrator - TransportOrchestrator (concurrent create/poll/collect)
    records      - Failure records kept between runs
    pipeline     - upload_translations, download_translations

Python 3.13+.
"""

from .client import FetchResponse, ProjectData, TransifexClient, TransportClient, UploadStatus
from .jobs import FailureDescriptor, RemoteJob, TransferResult, TransferSummary, UploadDetails
from .orchestrator import TransportOrchestrator, UploadSource
from .pipeline import download_translations, save_translations, upload_translations

__all__ = [
    "FailureDescriptor",
    "FetchResponse",
    "ProjectData",
    "RemoteJob",
    "TransferResult",
    "TransferSummary",
    "TransifexClient",
    "TransportClient",
    "TransportOrchestrator",
    "UploadDetails",
    "UploadSource",
    "UploadStatus",
    "download_translations",
    "save_translations",
    "upload_translations",
]
