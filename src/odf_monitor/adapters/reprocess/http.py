"""Reprocess adapter using the ingestion backend's HTTP API."""

import logging
from urllib.parse import urlparse

import httpx

from ...domain.errors import BadRequestError, UpstreamUnavailableError
from ...domain.models import ReprocessResult
from ...ports.reprocess import ReprocessPort

logger = logging.getLogger(__name__)

REPROCESS_PATH = "/odf-documents/reprocess"


def _validate_url(url: str) -> str:
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise BadRequestError(f"Invalid backend URL: {url}")
    return url.rstrip("/")


class HttpReprocessAdapter(ReprocessPort):
    """Reprocess implementation posting to the ingestion backend."""

    def __init__(
        self,
        backend_url: str | None = None,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.backend_url = _validate_url(backend_url) if backend_url else None
        self.timeout = timeout
        self.transport = transport

    def reprocess(self, document_id: str, backend_url: str | None = None) -> ReprocessResult:
        base_url = _validate_url(backend_url) if backend_url else self.backend_url
        if base_url is None:
            raise BadRequestError("No backend URL configured for reprocessing")

        logger.info(f"Reprocessing {document_id} via {base_url}")
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(
                    f"{base_url}{REPROCESS_PATH}",
                    json={"documentId": document_id},
                )
        except httpx.HTTPError as e:
            raise UpstreamUnavailableError(f"Reprocess backend unavailable: {e}") from e

        if response.is_success:
            return ReprocessResult(
                success=True, message=f"Reprocessing started for document {document_id}"
            )

        logger.warning(f"Reprocess request failed: HTTP {response.status_code}")
        return ReprocessResult(
            success=False,
            message=f"Backend returned HTTP {response.status_code}: {response.text[:200]}",
        )
