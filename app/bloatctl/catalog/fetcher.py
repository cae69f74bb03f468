"""HTTP retrieval of the classification catalog and its revision.

The catalog document and the revision listing are two independent GET
requests. The fetcher performs no retries and returns no partial state:
either both reads succeed or a FetchError is raised.
"""

import logging
from typing import Any

import httpx

from bloatctl import __version__
from bloatctl.catalog.errors import MalformedRevisionError, UnreachableError
from bloatctl.core.settings import DEFAULT_CATALOG_URL, DEFAULT_REVISION_URL

logger = logging.getLogger(__name__)


class CatalogFetcher:
    """Fetches the raw catalog document and its latest revision.

    Example:
        >>> with CatalogFetcher(timeout=10.0) as fetcher:
        ...     raw, revision = fetcher.fetch()
    """

    def __init__(
        self,
        catalog_url: str = DEFAULT_CATALOG_URL,
        revision_url: str = DEFAULT_REVISION_URL,
        timeout: float = 15.0,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            catalog_url: URL of the JSON classification document.
            revision_url: URL returning a JSON array of commit objects.
            timeout: Timeout in seconds applied to every request.
            client: Optional pre-configured client (used by tests).
        """
        self._catalog_url = catalog_url
        self._revision_url = revision_url
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=timeout,
            follow_redirects=True,
            headers={"User-Agent": f"bloatctl/{__version__}"},
        )

    def __enter__(self) -> "CatalogFetcher":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP client if this fetcher created it."""
        if self._owns_client:
            self._client.close()

    def fetch(self) -> tuple[bytes, str]:
        """Fetch the catalog document and its revision.

        Returns:
            Tuple of (raw document bytes, revision identifier).

        Raises:
            UnreachableError: If either request fails.
            MalformedRevisionError: If the revision cannot be extracted.
        """
        raw = self._get(self._catalog_url).content
        revision = self.fetch_revision()
        logger.info("Fetched catalog revision %s (%d bytes)", revision, len(raw))
        return raw, revision

    def fetch_revision(self) -> str:
        """Fetch only the latest revision identifier.

        Returns:
            The `sha` of the first commit object in the response.

        Raises:
            UnreachableError: If the request fails.
            MalformedRevisionError: If the body is not a non-empty JSON
                array whose first object carries a string `sha`.
        """
        response = self._get(
            self._revision_url,
            headers={"Accept": "application/vnd.github+json"},
        )
        try:
            payload: Any = response.json()
        except ValueError as e:
            raise MalformedRevisionError(f"Revision response is not JSON: {e}") from e
        except RecursionError as e:
            raise MalformedRevisionError("Revision response is nested too deeply") from e

        return _extract_revision(payload)

    def _get(self, url: str, headers: dict[str, str] | None = None) -> httpx.Response:
        """Issue a GET request, translating transport failures.

        Raises:
            UnreachableError: On timeout, connection error or non-2xx status.
        """
        logger.debug("GET %s", url)
        try:
            response = self._client.get(url, headers=headers)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise UnreachableError(f"Timed out fetching {url}") from e
        except httpx.HTTPStatusError as e:
            raise UnreachableError(
                f"HTTP {e.response.status_code} fetching {url}",
            ) from e
        except httpx.RequestError as e:
            raise UnreachableError(f"Cannot reach {url}: {e}") from e
        return response


def _extract_revision(payload: Any) -> str:
    """Extract the revision from a decoded commit listing.

    Raises:
        MalformedRevisionError: If the payload has an unexpected shape.
    """
    if not isinstance(payload, list) or not payload:
        raise MalformedRevisionError("Revision response is not a non-empty array")

    first = payload[0]
    if not isinstance(first, dict):
        raise MalformedRevisionError("First revision entry is not an object")

    sha = first.get("sha")
    if not isinstance(sha, str) or not sha.strip():
        raise MalformedRevisionError("First revision entry has no 'sha'")

    return sha.strip()
