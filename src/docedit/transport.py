"""Transports: where docedit reads documents from and sends batchUpdates to.

Every manager talks to a ``Transport``:
- GoogleDocsTransport: documents.get / documents.batchUpdate over HTTPS
- LocalFileTransport: snapshot JSON files on disk; writes are only recorded

docedit.mock provides a transport backed by an in-memory document service.
"""

from __future__ import annotations

import json
import ssl
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path

    from docedit.config import Settings

import certifi
import httpx

from docedit.config import get_settings
from docedit.exceptions import (
    APIError,
    AuthenticationError,
    NotFoundError,
    TransportError,
)

API_BASE = "https://docs.googleapis.com/v1/documents"
DEFAULT_TIMEOUT = 60


@dataclass(frozen=True)
class DocumentData:
    """One documents.get snapshot.

    ``raw`` is the payload as returned; docedit.structure parses it into
    index-addressed elements.
    """

    document_id: str
    title: str
    raw: dict[str, Any]


class Transport(ABC):
    """Source of document snapshots and sink for batchUpdate requests."""

    @abstractmethod
    async def get_document(self, document_id: str) -> DocumentData:
        """Return a fresh snapshot of the document."""
        ...

    @abstractmethod
    async def batch_update(
        self, document_id: str, requests: list[dict[str, Any]]
    ) -> dict[str, Any]:
        """Submit serialized requests as one atomic batch.

        Args:
            document_id: Target document
            requests: Wire-format request dicts, applied in order

        Returns:
            The response body; ``replies`` holds one entry per request
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        ...


class GoogleDocsTransport(Transport):
    """Bearer-token client for the Docs REST endpoint.

    HTTP failures are raised as docedit exceptions: 401 and 403 as
    AuthenticationError, 404 as NotFoundError, anything else as APIError
    carrying the status code and response body.
    """

    def __init__(
        self,
        access_token: str,
        timeout: int = DEFAULT_TIMEOUT,
        api_base: str = API_BASE,
    ) -> None:
        self._api_base = api_base.rstrip("/")
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        self._client = httpx.AsyncClient(
            timeout=timeout,
            verify=ssl_context,
            headers={
                "Authorization": f"Bearer {access_token}",
                "Accept": "application/json",
            },
        )

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> GoogleDocsTransport:
        """Build a transport from DOCEDIT_* settings."""
        settings = settings or get_settings()
        if not settings.access_token:
            raise AuthenticationError(
                "No access token configured. Set DOCEDIT_ACCESS_TOKEN."
            )
        return cls(
            access_token=settings.access_token,
            timeout=settings.timeout,
            api_base=settings.api_base,
        )

    async def get_document(self, document_id: str) -> DocumentData:
        payload = await self._send("GET", f"{self._api_base}/{document_id}")
        return DocumentData(
            document_id=payload.get("documentId", document_id),
            title=payload.get("title", ""),
            raw=payload,
        )

    async def batch_update(
        self, document_id: str, requests: list[dict[str, Any]]
    ) -> dict[str, Any]:
        return await self._send(
            "POST",
            f"{self._api_base}/{document_id}:batchUpdate",
            body={"requests": requests},
        )

    async def _send(
        self, method: str, url: str, body: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        try:
            response = await self._client.request(method, url, json=body)
        except httpx.RequestError as e:
            raise TransportError(f"Network error: {e}") from e

        if response.is_error:
            self._raise_for_status(response)
        result: dict[str, Any] = response.json()
        return result

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        status = response.status_code
        if status == 401:
            raise AuthenticationError("Invalid or expired access token")
        if status == 403:
            raise AuthenticationError(
                "Access denied. The token needs the documents scope and "
                "access to this document."
            )
        if status == 404:
            raise NotFoundError(
                "Document not found. Check the ID and sharing permissions."
            )
        raise APIError(f"API error ({status}): {response.text}", status_code=status)

    async def close(self) -> None:
        await self._client.aclose()


class LocalFileTransport(Transport):
    """Reads ``<document_id>.json`` snapshots from a directory.

    Nothing is written back. Each batch is appended to ``sent`` and answered
    with empty replies, which is enough to assert on the requests a manager
    produced for a recorded document.
    """

    def __init__(self, golden_dir: Path) -> None:
        self._golden_dir = golden_dir
        self.sent: list[list[dict[str, Any]]] = []

    async def get_document(self, document_id: str) -> DocumentData:
        path = self._golden_dir / f"{document_id}.json"
        if not path.exists():
            raise NotFoundError(f"Document not found: {document_id}")
        payload = json.loads(path.read_text(encoding="utf-8"))
        return DocumentData(
            document_id=payload.get("documentId", document_id),
            title=payload.get("title", ""),
            raw=payload,
        )

    async def batch_update(
        self,
        document_id: str,  # noqa: ARG002
        requests: list[dict[str, Any]],
    ) -> dict[str, Any]:
        self.sent.append(requests)
        return {"replies": [{}] * len(requests)}

    async def close(self) -> None:
        pass
