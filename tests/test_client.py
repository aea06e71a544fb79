"""Tests for the notes service client."""

import io

import httpx
import pytest

from notes_cli.client import (
    HTTPStatusFailure,
    OutputFailure,
    TaskClient,
    TaskServiceError,
    TransportFailure,
)
from notes_cli.constants import BASE_URL
from tests.conftest import FakeNotesServer, refuse_connection


@pytest.fixture
def client(server: FakeNotesServer):
    with httpx.Client(transport=server.transport) as http:
        yield TaskClient(http)


class TestErrors:
    """Tests for error types."""

    def test_status_failure_message(self):
        """Test the status line format."""
        err = HTTPStatusFailure(404, "Not Found")

        assert str(err) == "HTTP: 404 Not Found"
        assert err.status_line == "404 Not Found"
        assert isinstance(err, TaskServiceError)

    def test_status_failure_without_reason(self):
        """Test a status code with no reason phrase."""
        assert str(HTTPStatusFailure(599, "")) == "HTTP: 599"

    def test_transport_failure_message(self):
        """Test the transport error format."""
        err = TransportFailure("GET", "http://localhost:8000", "Name or service not known")

        assert str(err) == 'GET "http://localhost:8000": Name or service not known'
        assert isinstance(err, TaskServiceError)


class TestTaskClient:
    """Tests for TaskClient requests and outcomes."""

    def test_default_base_url(self, client: TaskClient):
        """Test the fixed service address."""
        assert client.base_url == BASE_URL == "http://localhost:8000"
        assert client.task_url(12) == "http://localhost:8000/12"

    def test_trailing_slash_is_dropped(self):
        """Test custom base URLs are normalised."""
        with httpx.Client() as http:
            client = TaskClient(http, "http://notes.test/")
        assert client.task_url(1) == "http://notes.test/1"

    def test_list_streams_body(self, server: FakeNotesServer, client: TaskClient):
        """Test that list writes the whole body and reports its size."""
        server.body = b"1: buy milk\n2: buy bread\n"
        out = io.BytesIO()

        written = client.list_tasks(out)

        assert out.getvalue() == b"1: buy milk\n2: buy bread\n"
        assert written == len(server.body)

    def test_list_empty_body(self, server: FakeNotesServer, client: TaskClient):
        """Test an empty listing."""
        out = io.BytesIO()

        assert client.list_tasks(out) == 0
        assert out.getvalue() == b""

    @pytest.mark.parametrize("status", [200, 201, 204, 302, 399])
    def test_success_statuses(self, status, server: FakeNotesServer, client: TaskClient):
        """Test that anything below 400 counts as success."""
        server.status_code = status

        client.add_task("x")
        client.update_task(1, "x")
        client.remove_task(1)

        assert [r.method for r in server.requests] == ["POST", "PUT", "DELETE"]

    @pytest.mark.parametrize(
        "status,line",
        [(400, "400 Bad Request"), (404, "404 Not Found"), (503, "503 Service Unavailable")],
    )
    def test_error_statuses(self, status, line, server: FakeNotesServer, client: TaskClient):
        """Test that 400 and above raise HTTPStatusFailure."""
        server.status_code = status

        with pytest.raises(HTTPStatusFailure) as exc_info:
            client.remove_task(9)

        assert exc_info.value.status_code == status
        assert str(exc_info.value) == f"HTTP: {line}"

    def test_redirects_are_not_followed(self, server: FakeNotesServer, client: TaskClient):
        """Test that a redirect status is returned as-is."""
        server.handler = lambda request: httpx.Response(
            301, headers={"Location": "http://elsewhere.test/"}
        )

        client.add_task("x")

        assert len(server.requests) == 1

    def test_empty_description_sends_empty_body(self, server: FakeNotesServer, client: TaskClient):
        """Test that an empty description is still sent as text/plain."""
        client.add_task("")

        assert server.last_request.content == b""
        assert server.last_request.headers["content-type"] == "text/plain"

    def test_transport_failure_on_send(self, server: FakeNotesServer, client: TaskClient):
        """Test that connection errors become TransportFailure."""
        server.handler = refuse_connection

        with pytest.raises(TransportFailure) as exc_info:
            client.update_task(3, "buy bread")

        err = exc_info.value
        assert err.method == "PUT"
        assert err.url == "http://localhost:8000/3"
        assert err.detail == "Connection refused"
        assert isinstance(err.__cause__, httpx.ConnectError)

    def test_transport_failure_on_list(self, server: FakeNotesServer, client: TaskClient):
        """Test that list reports transport errors the same way."""
        server.handler = refuse_connection
        out = io.BytesIO()

        with pytest.raises(TransportFailure, match='GET "http://localhost:8000"'):
            client.list_tasks(out)
        assert out.getvalue() == b""

    def test_timeout_is_a_transport_failure(self, server: FakeNotesServer, client: TaskClient):
        """Test that timeouts are classified as transport errors."""

        def time_out(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        server.handler = time_out

        with pytest.raises(TransportFailure, match="timed out"):
            client.add_task("x")

    def test_flush_failure_is_an_output_failure(self, server: FakeNotesServer, client: TaskClient):
        """Test that errors writing the listing become OutputFailure."""

        class FullDisk:
            def write(self, data: bytes) -> int:
                return len(data)

            def flush(self) -> None:
                raise OSError(28, "No space left on device")

        with pytest.raises(OutputFailure) as exc_info:
            client.list_tasks(FullDisk())

        assert str(exc_info.value) == "write output: No space left on device"
        assert isinstance(exc_info.value, TaskServiceError)
        assert isinstance(exc_info.value.__cause__, OSError)
