from __future__ import annotations
import asyncio
import os
from typing import Optional, Tuple

from playground.playground_datatypes import FetchError


def resolve_locator(locator: str, base_dir: Optional[str] = None) -> str:
    """Map a 'file://...' locator or a plain path to a filesystem path."""
    rest = locator[7:] if locator.startswith("file://") else locator
    # Absolute filesystem root
    if rest.startswith("/"):
        # file:/// → '/'
        return "/" + rest.lstrip("/")
    # Home directory
    if rest.startswith("~"):
        tail = rest[1:]
        return os.path.expanduser("~" + (tail if tail.startswith("/") else ("/" + tail if tail else "")))
    base = base_dir or os.getcwd()
    # Working directory relative
    if rest.startswith("./"):
        return os.path.normpath(os.path.join(base, rest[2:] or ""))
    # Empty → base dir or CWD
    if rest == "":
        return base
    return os.path.normpath(os.path.join(base, rest))


def _read_bytes(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


async def file_get(locator: str, *, base_dir: Optional[str] = None) -> Tuple[bytes, Optional[str]]:
    """Read a file resource. Returns (body, None); file resources carry no content type."""
    path = resolve_locator(locator, base_dir)
    if os.path.isdir(path):
        raise FetchError(locator, f"is a directory: {path}")
    try:
        data = await asyncio.to_thread(_read_bytes, path)
    except OSError as e:
        raise FetchError(locator, f"{type(e).__name__}: {e}") from e
    return data, None
