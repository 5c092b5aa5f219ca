"""Blocking HTTP GET transport built on ``requests.Session``.

Only two operations are needed: fetch a small text document and stream a
large binary body to disk. There is no retry loop; a failed request is
reported immediately.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union

import requests
from requests import exceptions as req_exc

from ..errors import FilesystemError, TransportError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024

Timeout = Union[None, float, Tuple[Optional[float], Optional[float]]]


@dataclass
class HttpConfig:
    """Timeouts in seconds; None waits forever."""

    connect_timeout_s: Optional[float] = None
    read_timeout_s: Optional[float] = None

    @property
    def timeout(self) -> Timeout:
        if self.connect_timeout_s is None and self.read_timeout_s is None:
            return None
        return (self.connect_timeout_s, self.read_timeout_s)


class HttpClient:
    def __init__(self, cfg: Optional[HttpConfig] = None, session: Optional[requests.Session] = None) -> None:
        self.cfg = cfg or HttpConfig()
        self.session = session or requests.Session()

    def _get(self, url: str, *, stream: bool) -> requests.Response:
        logger.info("GET %s", url)
        try:
            resp = self.session.get(url, timeout=self.cfg.timeout, stream=stream)
        except req_exc.RequestException as e:
            raise TransportError(f"GET {url} failed: {e}", url=url) from e
        try:
            resp.raise_for_status()
        except req_exc.RequestException as e:
            resp.close()
            raise TransportError(f"GET {url} failed: {e}", url=url) from e
        return resp

    def get_text(self, url: str) -> str:
        """Return the response body, which must be valid UTF-8."""

        resp = self._get(url, stream=False)
        try:
            return resp.content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise TransportError(f"Response body of {url} is not valid UTF-8: {e}", url=url) from e

    def download(self, url: str, dest: Union[str, Path]) -> int:
        """Stream the body of ``url`` into a new file at ``dest``.

        Returns the number of bytes written. The body is copied chunk by chunk
        and never held in memory as a whole.
        """

        dest = Path(dest)
        resp = self._get(url, stream=True)
        written = 0
        try:
            with resp, dest.open("wb") as fh:
                for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        fh.write(chunk)
                        written += len(chunk)
        except req_exc.RequestException as e:
            raise TransportError(f"Reading body of {url} failed: {e}", url=url) from e
        except OSError as e:
            raise FilesystemError(f"Unable to write `{dest}`: {e}", path=str(dest)) from e

        logger.info("Downloaded %d bytes to %s", written, dest)
        return written
