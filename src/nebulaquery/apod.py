"""HTTP client for NASA's Astronomy Picture of the Day."""
from __future__ import annotations

from typing import Any, Optional

import httpx

from .log_utils import logger


class ApodFetcher:
    """Fetches today's APOD record. Never raises; failures become ``None``."""

    def __init__(
        self,
        api_key: str,
        url: str,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._api_key = api_key.strip()
        self._url = url
        self._client = client or httpx.AsyncClient()

    @property
    def enabled(self) -> bool:
        return bool(self._api_key)

    async def fetch_today(self) -> Optional[Any]:
        """Return the APOD record as sent by NASA, or ``None`` on any failure."""
        if not self.enabled:
            logger.info("NASA_API_KEY not set; skipping APOD")
            return None

        try:
            response = await self._client.get(
                self._url, params={"api_key": self._api_key}
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "NASA API returned non-2xx status: %s", exc.response.status_code
            )
            return None
        except httpx.RequestError as exc:
            logger.warning("Failed to reach NASA API: %s", exc)
            return None
        except ValueError as exc:
            logger.warning("NASA API returned undecodable JSON: %s", exc)
            return None
        except Exception:  # noqa: BLE001
            logger.exception("APOD fetch failed")
            return None

        return data

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()
