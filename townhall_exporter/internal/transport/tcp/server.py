"""
Metrics TCP server.

A deliberately small HTTP/1.1 responder: one request line per connection,
a single GET route, no keep-alive and no request bodies.
"""
import asyncio
import uuid
from http import HTTPStatus
from typing import Dict, Optional, Protocol, Tuple

from townhall_exporter.internal.domain.errors import ScrapeError
from townhall_exporter.internal.metrics import REQUESTS_TOTAL
from townhall_exporter.pkg.logger.logger import get_logger, set_request_id


logger = get_logger(__name__)


HTTP_VERSION = "HTTP/1.1"
DEFAULT_METRICS_PATH = "/metrics"
DEFAULT_READ_TIMEOUT = 0.5  # seconds


class MetricsSourceProtocol(Protocol):
    """Protocol for the metrics body provider."""

    async def render(self) -> str:
        """Render metrics, raising ScrapeError on failure."""
        ...


def build_response(
    status: HTTPStatus,
    body: Optional[str] = None,
    headers: Optional[Dict[str, str]] = None,
) -> bytes:
    """
    Serialize a response.

    Args:
        status: Response status.
        body: Response body, the status line text if None.
        headers: Extra headers written before Content-Length.

    Returns:
        Raw response bytes.
    """
    status_text = f"{status.value} {status.phrase.upper()}"
    payload = (body if body is not None else status_text).encode("utf-8")

    head = [f"{HTTP_VERSION} {status_text}"]
    for key, value in (headers or {}).items():
        head.append(f"{key}: {value}")
    head.append(f"Content-Length: {len(payload)}")

    return ("\r\n".join(head) + "\r\n\r\n").encode("utf-8") + payload


class MetricsServer:
    """
    Serves the metrics endpoint on asyncio streams.

    Failures of a single connection are logged and never stop the server.
    """

    def __init__(
        self,
        source: MetricsSourceProtocol,
        host: str = "localhost",
        port: int = 12080,
        metrics_path: str = DEFAULT_METRICS_PATH,
        read_timeout: float = DEFAULT_READ_TIMEOUT,
    ) -> None:
        """
        Initialize the server.

        Args:
            source: Provider of the metrics body.
            host: Address to bind.
            port: Port to bind, 0 for an ephemeral port.
            metrics_path: The only path served.
            read_timeout: Seconds to wait for the request line.
        """
        self._source = source
        self._host = host
        self._port = port
        self._metrics_path = metrics_path
        self._read_timeout = read_timeout
        self._server: Optional[asyncio.AbstractServer] = None
        self._stopping = False

    @property
    def bound_port(self) -> Optional[int]:
        """Port actually bound, None before start()."""
        if self._server is None or not self._server.sockets:
            return None
        return self._server.sockets[0].getsockname()[1]

    async def start(self) -> None:
        """Bind the listener."""
        self._server = await asyncio.start_server(
            self.handle_connection, self._host, self._port
        )
        logger.info(
            "Metrics server listening",
            host=self._host,
            port=self.bound_port,
            path=self._metrics_path,
        )

    async def serve_forever(self) -> None:
        """Bind if needed and serve until stopped."""
        if self._server is None:
            await self.start()
        try:
            await self._server.serve_forever()
        except asyncio.CancelledError:
            if not self._stopping:
                raise

    async def stop(self) -> None:
        """Stop accepting connections."""
        if self._server is not None:
            self._stopping = True
            self._server.close()
            await self._server.wait_closed()
            self._server = None
            logger.info("Metrics server stopped")

    async def handle_connection(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
    ) -> None:
        """Serve a single request and close the connection."""
        set_request_id(uuid.uuid4().hex[:12])
        try:
            request_line = await self._read_request_line(reader)
            if request_line is None:
                return

            status, body = await self._dispatch(request_line)
            REQUESTS_TOTAL.labels(status_code=str(status.value)).inc()

            writer.write(build_response(status, body))
            await writer.drain()
        except (ConnectionError, asyncio.TimeoutError) as e:
            logger.debug("Client went away", error=str(e))
        except Exception as e:
            logger.error(f"Unexpected error serving request: {e}", exc_info=True)
        finally:
            writer.close()
            try:
                await writer.wait_closed()
            except ConnectionError:
                pass
            set_request_id(None)

    async def _read_request_line(self, reader: asyncio.StreamReader) -> Optional[str]:
        """
        Read the request line.

        Returns:
            The line without its terminator, or None when nothing usable
            arrived (EOF, blank line, timeout, oversized or undecodable).
        """
        try:
            raw = await asyncio.wait_for(reader.readline(), timeout=self._read_timeout)
        except asyncio.TimeoutError:
            logger.debug("Timed out waiting for request line")
            return None
        except (ConnectionError, asyncio.LimitOverrunError, ValueError) as e:
            logger.debug("Unreadable request line", error=str(e))
            return None

        try:
            line = raw.decode("utf-8").rstrip("\r\n")
        except UnicodeDecodeError:
            logger.debug("Request line is not valid UTF-8")
            return None

        return line or None

    async def _dispatch(self, request_line: str) -> Tuple[HTTPStatus, Optional[str]]:
        """Route a request line to a status and optional body."""
        tokens = request_line.split(" ")
        if len(tokens) != 3:
            logger.info("Bad request", request_line=request_line[:200])
            return HTTPStatus.BAD_REQUEST, None

        method, path, _version = tokens
        if method != "GET" or path != self._metrics_path:
            logger.info("Not found", method=method, path=path)
            return HTTPStatus.NOT_FOUND, None

        try:
            body = await self._source.render()
        except ScrapeError as e:
            logger.error("Scrape failed", error=e.message, cause=type(e.cause).__name__)
            return HTTPStatus.NOT_FOUND, None

        return HTTPStatus.OK, body
