import httpx
from typing import Optional

from app.services.stats.errors import SourceUnavailable


async def fetch_snapshot(url: str, timeout: float, transport: Optional[httpx.AsyncBaseTransport] = None) -> bytes:
    """
    Downloads the full statistics snapshot, following redirects. Any final
    non-2xx answer, transport error or timeout is reported as SourceUnavailable.
    """
    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport, follow_redirects=True) as client:
            async with client.stream('GET', url) as resp:
                resp.raise_for_status()
                chunks = []
                async for chunk in resp.aiter_bytes():
                    chunks.append(chunk)
    except httpx.TimeoutException as e:
        raise SourceUnavailable(f"Timed out fetching database from server ({url})") from e
    except httpx.HTTPStatusError as e:
        raise SourceUnavailable(
            f"Failed to fetch database from server: HTTP {e.response.status_code}"
        ) from e
    except httpx.HTTPError as e:
        raise SourceUnavailable(f"Failed to fetch database from server: {e}") from e

    data = b"".join(chunks)
    if not data:
        raise SourceUnavailable("Server returned an empty database file")
    return data
