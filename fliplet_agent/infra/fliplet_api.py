"""
Fliplet REST API client

Read-only access to the Fliplet platform with retry on rate limits and
network faults, and size capping of data source row listings so a large
table never lands in the model's context in full.
"""

import asyncio
from typing import Any, Optional

import httpx
from loguru import logger

from fliplet_agent.config.constants import ENTRIES_FIELD, TRUNCATION_NOTE
from fliplet_agent.utils.errors import (
    BackendRetryExhaustedError,
    BackendStatusError,
    ConfigurationError,
)

DEFAULT_BASE_URL = "https://api.fliplet.com"
ERROR_BODY_PREVIEW = 200


class FlipletAPI:
    """
    Authenticated GET client for the Fliplet API.

    Rate limits (429) and transport failures are retried with exponential
    backoff (base delay * 2^attempt) until ``max_retries`` attempts are spent.
    Any other non-2xx status fails immediately.
    """

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        max_retries: int = 3,
        retry_base_delay: float = 0.5,
        max_entries: int = 50,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        if not token:
            raise ConfigurationError("FLIPLET_API_TOKEN is missing")

        self.max_retries = max_retries
        self.retry_base_delay = retry_base_delay
        self.max_entries = max_entries
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self._headers = {"Auth-token": token}

    async def __aenter__(self) -> "FlipletAPI":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying connection pool"""
        await self._client.aclose()

    async def request(self, path: str) -> Any:
        """
        GET ``path`` and return the decoded JSON body.

        Args:
            path: API path relative to the base URL (e.g. ``/v1/apps/123``)

        Returns:
            Parsed JSON response

        Raises:
            BackendStatusError: non-2xx status other than 429
            BackendRetryExhaustedError: every attempt was rate limited or failed in transport
        """
        last_error: Optional[Exception] = None

        for attempt in range(self.max_retries):
            try:
                response = await self._client.get(path, headers=self._headers)
            except httpx.TransportError as e:
                last_error = e
                logger.warning(f"Network error on {path} (attempt {attempt + 1}/{self.max_retries}): {e!r}")
                await self._backoff(attempt)
                continue

            if response.status_code == 429:
                last_error = BackendStatusError(429, "Rate Limited", path)
                logger.warning(f"429 Rate Limited on {path} (attempt {attempt + 1}/{self.max_retries})")
                await self._backoff(attempt)
                continue

            if not response.is_success:
                error = BackendStatusError(
                    response.status_code,
                    response.reason_phrase,
                    response.text[:ERROR_BODY_PREVIEW],
                )
                logger.error(f"Fliplet API request failed: GET {path} -> {error}")
                raise error

            return response.json()

        raise BackendRetryExhaustedError(path, self.max_retries, last_error) from last_error

    async def _backoff(self, attempt: int) -> None:
        # No point waiting after the final attempt
        if attempt >= self.max_retries - 1:
            return
        delay = self.retry_base_delay * (2 ** attempt)
        if delay > 0:
            logger.debug(f"Retrying in {delay:.2f}s")
            await asyncio.sleep(delay)

    # ------------------------------------------------------------------
    # Domain accessors
    # ------------------------------------------------------------------

    async def get_app(self, app_id: Any) -> Any:
        return await self.request(f"/v1/apps/{app_id}")

    async def list_data_sources(self, app_id: Any) -> Any:
        return await self.request(f"/v1/data-sources?appId={app_id}")

    async def get_data_source(self, data_source_id: Any) -> Any:
        return await self.request(f"/v1/data-sources/{data_source_id}")

    async def get_data_source_entries(self, data_source_id: Any) -> Any:
        """Fetch the rows of a data source, capped to ``max_entries``."""
        data = await self.request(f"/v1/data-sources/{data_source_id}/data")
        return truncate_entries(data, self.max_entries)

    async def list_media_folders(self, app_id: Any) -> Any:
        return await self.request(f"/v1/media/folders?appId={app_id}")

    async def get_folder_files(self, folder_id: Any) -> Any:
        return await self.request(f"/v1/media/folders/{folder_id}/files")

    async def get_file(self, file_id: Any) -> Any:
        return await self.request(f"/v1/media/files/{file_id}")


def locate_entries(data: Any) -> Optional[list]:
    """
    Find the row collection in a data source listing.

    Rows are either the ``entries`` field of an object response or the
    response itself when the backend returns a bare list.
    """
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        entries = data.get(ENTRIES_FIELD)
        if isinstance(entries, list):
            return entries
    return None


def truncate_entries(data: Any, max_entries: int = 50) -> Any:
    """
    Cap a row listing to its first ``max_entries`` rows.

    Listings at or below the cap (and responses without a row collection)
    are returned unchanged. Larger ones are replaced by a summary carrying
    the total and shown counts, a note for the model, and the first rows
    in their original order.
    """
    entries = locate_entries(data)
    if entries is None or len(entries) <= max_entries:
        return data

    logger.info(f"Truncating data source listing: {len(entries)} -> {max_entries} entries")
    return {
        "truncated": True,
        "totalCount": len(entries),
        "shownCount": max_entries,
        "note": TRUNCATION_NOTE.format(shown=max_entries, total=len(entries)),
        "entries": entries[:max_entries],
    }
