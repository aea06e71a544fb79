"""HTTP client for the remote notes service.

Maps the four task operations onto requests against the service:

    list    GET    <base>
    add     POST   <base>           body: description (text/plain)
    update  PUT    <base>/<index>   body: description (text/plain)
    remove  DELETE <base>/<index>

A status of 400 or above fails with HTTPStatusFailure; network-level
problems fail with TransportFailure. A listing that cannot be written out
fails with OutputFailure.
"""

from __future__ import annotations

from typing import BinaryIO

import httpx

from notes_cli.constants import BASE_URL, TEXT_CONTENT_TYPE
from notes_cli.logging import get_logger

logger = get_logger(__name__)


class TaskServiceError(Exception):
    """Base class for failed calls to the notes service."""


class HTTPStatusFailure(TaskServiceError):
    """The service answered with an error status (>= 400)."""

    def __init__(self, status_code: int, reason: str) -> None:
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"HTTP: {self.status_line}")

    @property
    def status_line(self) -> str:
        return f"{self.status_code} {self.reason}".rstrip()


class TransportFailure(TaskServiceError):
    """The request never produced a response (refused, DNS, timeout...)."""

    def __init__(self, method: str, url: str, detail: str) -> None:
        self.method = method
        self.url = url
        self.detail = detail
        super().__init__(f'{method} "{url}": {detail}')


class OutputFailure(TaskServiceError):
    """The response could not be written out (closed pipe, full disk...)."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"write output: {detail}")


def _describe(error: httpx.RequestError) -> str:
    return str(error) or error.__class__.__name__


def _encode(text: str) -> bytes:
    # argv that is not valid UTF-8 arrives surrogate-escaped; send the raw bytes
    return text.encode("utf-8", "surrogateescape")


def _raise_for_status(response: httpx.Response) -> None:
    if response.status_code >= 400:
        raise HTTPStatusFailure(response.status_code, response.reason_phrase)


class TaskClient:
    """Task operations over an injected httpx.Client.

    The caller owns the http client (and closes it); this class never
    creates one itself.
    """

    def __init__(self, http: httpx.Client, base_url: str = BASE_URL) -> None:
        self._http = http
        self._base_url = base_url.rstrip("/")

    @property
    def base_url(self) -> str:
        return self._base_url

    def task_url(self, index: int) -> str:
        """URL of a single task."""
        return f"{self._base_url}/{index}"

    def list_tasks(self, out: BinaryIO) -> int:
        """Stream the task listing into ``out`` unchanged.

        Args:
            out: Binary stream receiving the response body

        Returns:
            Number of bytes written
        """
        url = self._base_url
        written = 0
        try:
            with self._http.stream("GET", url) as response:
                _raise_for_status(response)
                for chunk in response.iter_bytes():
                    self._write(out, chunk)
                    written += len(chunk)
        except httpx.RequestError as e:
            raise TransportFailure("GET", url, _describe(e)) from e
        self._write(out)
        logger.debug("Listed tasks", url=url, bytes=written)
        return written

    @staticmethod
    def _write(out: BinaryIO, chunk: bytes | None = None) -> None:
        """Write a chunk, or flush when there is none."""
        try:
            if chunk is None:
                out.flush()
            else:
                out.write(chunk)
        except OSError as e:
            raise OutputFailure(e.strerror or str(e)) from e

    def add_task(self, description: str) -> None:
        """Create a task from its description."""
        self._send("POST", self._base_url, description)

    def update_task(self, index: int, description: str) -> None:
        """Replace the description of task ``index``."""
        self._send("PUT", self.task_url(index), description)

    def remove_task(self, index: int) -> None:
        """Delete task ``index``."""
        self._send("DELETE", self.task_url(index))

    def _send(self, method: str, url: str, body: str | None = None) -> None:
        content = headers = None
        if body is not None:
            content = _encode(body)
            headers = {"Content-Type": TEXT_CONTENT_TYPE}
        try:
            response = self._http.request(method, url, content=content, headers=headers)
        except httpx.RequestError as e:
            raise TransportFailure(method, url, _describe(e)) from e
        # Body is not used, only the status
        response.close()
        logger.debug("Request done", method=method, url=url, status=response.status_code)
        _raise_for_status(response)
