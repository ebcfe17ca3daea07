"""
Remote dataset download for the AR Graph Plotter.

One GET per call, no retries and no timeout beyond httpx's default:
the caller re-runs the fetch if the user asks again.  Every outcome is
reported as a ``FetchResult`` holding the raw response bytes or a
``DataError``.
"""

import logging
from typing import Optional

import httpx

from .results import ErrorKind, FetchResult, Result

logger = logging.getLogger(__name__)


def parse_url(url: str) -> Optional[httpx.URL]:
    """Parsed absolute http(s) URL, or ``None`` if *url* is not one."""
    try:
        parsed = httpx.URL(url.strip())
    except (httpx.InvalidURL, TypeError):
        return None
    if parsed.scheme not in ('http', 'https') or not parsed.host:
        return None
    return parsed


async def fetch_json(url: str, client: Optional[httpx.AsyncClient] = None) -> FetchResult:
    """Download *url* and return its body bytes.

    Parameters
    ----------
    url : str
        Absolute http or https URL.
    client : httpx.AsyncClient, optional
        Client to reuse; a short-lived one is opened otherwise.

    Returns
    -------
    FetchResult
        ``INVALID_URL`` for a malformed URL, ``DOWNLOAD_FAILED`` for
        transport errors and non-2xx responses, ``NO_DATA`` for an empty
        body.
    """
    parsed = parse_url(url)
    if parsed is None:
        return Result.failure(ErrorKind.INVALID_URL)

    try:
        if client is None:
            async with httpx.AsyncClient(follow_redirects=True) as own_client:
                response = await own_client.get(parsed)
        else:
            response = await client.get(parsed)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        logger.warning("Download of %s failed: HTTP %d", parsed, exc.response.status_code)
        return Result.failure(ErrorKind.DOWNLOAD_FAILED,
                              f"HTTP {exc.response.status_code}")
    except httpx.HTTPError as exc:
        logger.warning("Download of %s failed: %s", parsed, exc)
        return Result.failure(ErrorKind.DOWNLOAD_FAILED, str(exc) or type(exc).__name__)

    if not response.content:
        return Result.failure(ErrorKind.NO_DATA)
    logger.info("Downloaded %d bytes from %s", len(response.content), parsed)
    return Result.success(response.content)


async def fetch_csv(url: str, client: Optional[httpx.AsyncClient] = None) -> FetchResult:
    return Result.failure(ErrorKind.NOT_IMPLEMENTED, "CSV fetching not yet implemented.")


async def fetch_rest(url: str, client: Optional[httpx.AsyncClient] = None) -> FetchResult:
    return Result.failure(ErrorKind.NOT_IMPLEMENTED, "RESTful fetching not yet implemented.")

