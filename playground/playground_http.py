from typing import Optional, Dict, Tuple

import httpx

from playground.playground_datatypes import FetchError


def is_http_locator(locator: str) -> bool:
    return locator.startswith(("http://", "https://"))


async def http_request(method: str, url: str, *, config: Optional[Dict] = None) -> Tuple[bytes, Optional[str]]:
    """
    Core HTTP helper.

    Returns (body, content-type) on 2xx. Transport errors and non-2xx
    responses raise FetchError. There is no retry: the user retries by
    repeating the action.

    config:
      - timeout: seconds, or None to wait for completion
      - headers: extra request headers
      - params: query parameters
    """
    cfg = dict(config or {})
    timeout = cfg.pop('timeout', None)
    timeout = float(timeout) if timeout is not None else None
    headers = dict(cfg.pop('headers', None) or {})
    params = dict(cfg.pop('params', None) or {})

    async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
        try:
            resp = await client.request(method.upper(), url, headers=headers, params=params)
        except httpx.HTTPError as e:
            raise FetchError(url, f"{type(e).__name__}: {e}") from e
    if 200 <= resp.status_code < 300:
        return resp.content, resp.headers.get("Content-Type")
    preview = (resp.text or "")[:200]
    raise FetchError(url, f"HTTP {resp.status_code}: {preview}")


async def http_get(url: str, config: Optional[Dict] = None) -> Tuple[bytes, Optional[str]]:
    return await http_request('GET', url, config=config)
