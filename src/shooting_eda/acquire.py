from __future__ import annotations

import logging
from pathlib import Path

import requests

log = logging.getLogger(__name__)

CHUNK_SIZE = 1 << 20


class SourceUnreachableError(RuntimeError):
    """The remote incident file could not be fetched."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Source unreachable: {url} ({reason})")
        self.url = url
        self.reason = reason


def download_source(url: str, destination: Path, timeout: float = 60.0, refresh: bool = False) -> Path:
    destination = Path(destination)
    if destination.exists() and not refresh:
        log.info("Using cached source file %s", destination)
        return destination

    destination.parent.mkdir(parents=True, exist_ok=True)
    partial = destination.with_name(destination.name + ".part")
    log.info("Downloading %s -> %s", url, destination)
    try:
        with requests.get(url, timeout=timeout, stream=True) as response:
            response.raise_for_status()
            written = 0
            with partial.open("wb") as handle:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    handle.write(chunk)
                    written += len(chunk)
    except requests.RequestException as exc:
        partial.unlink(missing_ok=True)
        raise SourceUnreachableError(url, str(exc)) from exc

    if written == 0:
        partial.unlink(missing_ok=True)
        raise SourceUnreachableError(url, "empty response body")

    partial.replace(destination)
    log.info("Saved %s bytes to %s", f"{written:,}", destination)
    return destination
