"""HTTP client for the remote model catalog."""

import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

import httpx

from modelfit.catalog.candidate import MB_PER_BILLION_PARAMS, ModelCandidate

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://huggingface.co"
DEFAULT_AUTHOR = "mlc-ai"
DEFAULT_LIMIT = 50
DEFAULT_QUANTIZATION = "q4f16_1"
DEFAULT_LIBRARY = "MLC"


class CatalogError(Exception):
    """The catalog could not be fetched or its response could not be read."""


def parse_timestamp(value: Any) -> int | None:
    """Parse an ISO-8601 timestamp to epoch milliseconds.

    Naive timestamps are taken as UTC. Anything unparsable gives None.
    """
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug("Unparsable catalog timestamp %r", value)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp() * 1000)


def short_id(model_id: str) -> str:
    """Drop the ``owner/`` prefix from a catalog identifier."""
    return model_id.rsplit("/", 1)[-1]


class CatalogClient:
    """Fetches model listings from a Hugging Face style ``/api/models`` API.

    Only models following the runtime's naming convention,
    ``<name>-<quantization>-<library>``, become candidates.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        author: str = DEFAULT_AUTHOR,
        limit: int = DEFAULT_LIMIT,
        quantization: str = DEFAULT_QUANTIZATION,
        library: str = DEFAULT_LIBRARY,
        timeout: float = 30.0,
        mb_per_billion: float = MB_PER_BILLION_PARAMS,
    ):
        """Initialize the catalog client.

        Args:
            base_url: Catalog host
            author: Organization whose models are listed
            limit: Maximum number of models requested
            quantization: Required quantization tag
            library: Required library tag
            timeout: HTTP timeout in seconds
            mb_per_billion: Memory estimate per billion parameters
        """
        self.base_url = base_url.rstrip("/")
        self.author = author
        self.limit = limit
        self.quantization = quantization
        self.library = library
        self.timeout = timeout
        self.mb_per_billion = mb_per_billion

    @property
    def suffix(self) -> str:
        return f"-{self.quantization}-{self.library}"

    async def fetch(self) -> list[dict[str, Any]]:
        """Fetch the raw model listing, most downloaded first.

        Raises:
            CatalogError: On transport, HTTP status or JSON errors
        """
        params = {
            "author": self.author,
            "sort": "downloads",
            "direction": -1,
            "limit": self.limit,
            "full": "true",
        }
        url = f"{self.base_url}/api/models"

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url, params=params)
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise CatalogError(f"Catalog request to {url} failed: {e}") from e
        except ValueError as e:
            raise CatalogError(f"Catalog returned invalid JSON: {e}") from e

        if not isinstance(data, list):
            raise CatalogError(f"Expected a list of models, got {type(data).__name__}")

        logger.debug("Catalog returned %d models", len(data))
        return data

    def matches_convention(self, model_id: str) -> bool:
        return model_id.endswith(self.suffix)

    def to_candidates(self, entries: Iterable[Any]) -> list[ModelCandidate]:
        """Turn raw listing entries into candidates.

        Entries that break the naming convention or carry no parameter count
        are dropped.
        """
        candidates = []
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            raw_id = entry.get("id") or entry.get("modelId")
            if not isinstance(raw_id, str):
                continue

            model_id = short_id(raw_id)
            if not self.matches_convention(model_id):
                continue

            timestamp = entry.get("lastModified") or entry.get("createdAt")
            candidate = ModelCandidate.from_id(
                model_id,
                last_modified_ms=parse_timestamp(timestamp),
                mb_per_billion=self.mb_per_billion,
            )
            if candidate is not None:
                candidates.append(candidate)

        return candidates

    async def fetch_candidates(self) -> list[ModelCandidate]:
        """Fetch the listing and convert it to candidates.

        Raises:
            CatalogError: If the listing cannot be fetched
        """
        candidates = self.to_candidates(await self.fetch())
        logger.info("Catalog offers %d candidate models", len(candidates))
        return candidates
