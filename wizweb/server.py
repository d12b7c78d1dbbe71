"""A small HTTP server answering from registered pages and CGI endpoints."""

from __future__ import annotations

import socket
import threading
from enum import IntEnum
from typing import Callable, Optional, Protocol

from wizweb.content import (
    INITIAL_WEBPAGE,
    M_INITIAL_WEBPAGE,
    MOBILE_INITIAL_WEBPAGE,
    ContentStore,
    StorageType,
)
from wizweb.handlers import HTTP_RESET, CgiResult, DeviceSettings
from wizweb.parser import (
    BAD_REQUEST_PAGE,
    CGI_RESPONSE_HEAD,
    HTTP_SERVER_PORT,
    NOT_FOUND_PAGE,
    ContentType,
    Method,
    find_http_uri_type,
    get_http_uri_name,
    make_http_response_head,
    mid,
    parse_http_request,
)

DATA_BUF_SIZE = 2048
HTTP_MAX_TIMEOUT_SEC = 3

# Largest CGI body that still fits in one buffer together with its header.
_MAX_CGI_BODY = DATA_BUF_SIZE - (len(CGI_RESPONSE_HEAD) + 8)

_INDEX_ALIASES = {
    "/": INITIAL_WEBPAGE,
    "m": M_INITIAL_WEBPAGE,
    "mobile": MOBILE_INITIAL_WEBPAGE,
}


class SocketState(IntEnum):
    """Progress of one HTTP transaction on a connection."""

    IDLE = 0
    REQ_INPROC = 1
    REQ_DONE = 2
    RES_INPROC = 3
    RES_DONE = 4


class _Connection(Protocol):
    def recv(self, bufsize: int) -> bytes: ...

    def sendall(self, data: bytes) -> None: ...

    def close(self) -> None: ...


def _encode(text: str) -> bytes:
    return text.encode("latin-1")


class HttpServer:
    """Serves registered pages by name and routes ``.cgi`` requests to the settings."""

    def __init__(
        self,
        store: Optional[ContentStore] = None,
        settings: Optional[DeviceSettings] = None,
        on_reset: Optional[Callable[[], None]] = None,
    ) -> None:
        self.store = store if store is not None else ContentStore()
        self.settings = settings if settings is not None else DeviceSettings()
        self.on_reset = on_reset
        self.state = SocketState.IDLE
        self.storage_type = StorageType.NONE
        self.server_address: Optional[tuple] = None
        self.ready = threading.Event()
        self._ticks = 0

    def time_handler(self) -> None:
        """Advance the one-second tick counter."""
        self._ticks = (self._ticks + 1) & 0xFFFFFFFF

    def timecount(self) -> int:
        """Number of one-second ticks counted so far."""
        return self._ticks

    def build_response(self, raw: str | bytes) -> bytes:
        """Return the complete response, header and body, for one request."""
        request = parse_http_request(raw)
        if request.method in (Method.GET, Method.HEAD):
            return self._respond_get(request.uri)
        if request.method == Method.POST:
            return self._respond_post(request.uri)
        return _encode(BAD_REQUEST_PAGE)

    def _cgi_reply(self, result: CgiResult) -> Optional[bytes]:
        if not result or result.length > _MAX_CGI_BODY:
            return None
        return _encode(f"{CGI_RESPONSE_HEAD}{result.length}\r\n\r\n{result.body}")

    def _respond_get(self, uri: str) -> bytes:
        try:
            name = get_http_uri_name(uri)
        except ValueError:
            return _encode(BAD_REQUEST_PAGE)
        name = _INDEX_ALIASES.get(name, name)
        content_type = find_http_uri_type(name)

        if content_type == ContentType.CGI:
            reply = self._cgi_reply(self.settings.get_cgi(name))
            return reply if reply is not None else _encode(NOT_FOUND_PAGE)

        found = self.store.find(name)
        if found is None:
            return _encode(NOT_FOUND_PAGE)
        index, length = found
        self.storage_type = StorageType.CODEFLASH

        body = bytearray()
        offset = 0
        # Bodies go out in buffer-sized pieces, one byte short of the buffer.
        while offset < length:
            piece = self.store.read(index, offset, DATA_BUF_SIZE - 1)
            if not piece:
                break
            body += piece
            offset += len(piece)

        # XML and unrecognised types are answered with the bare body.
        if content_type in (ContentType.XML, ContentType.ERR):
            return bytes(body)
        return _encode(make_http_response_head(content_type, length)) + bytes(body)

    def _respond_post(self, uri: str) -> bytes:
        try:
            name = mid(uri, "/", " HTTP")
        except ValueError:
            return _encode(NOT_FOUND_PAGE)
        if find_http_uri_type(name) != ContentType.CGI:
            return _encode(NOT_FOUND_PAGE)

        result = self.settings.post_cgi(name, uri)
        reply = self._cgi_reply(result)
        if reply is None:
            return _encode(NOT_FOUND_PAGE)
        if result.status == HTTP_RESET and self.on_reset is not None:
            self.on_reset()
        return reply

    def handle_connection(self, conn: _Connection) -> bytes:
        """Read one request from ``conn``, answer it and close the connection.

        Returns the bytes sent, empty when the peer sent nothing.
        """
        try:
            self.state = SocketState.IDLE
            raw = conn.recv(DATA_BUF_SIZE)
            if not raw:
                return b""
            self.state = SocketState.REQ_DONE
            response = self.build_response(raw)
            self.state = SocketState.RES_INPROC
            conn.sendall(response)
            self.state = SocketState.RES_DONE
            return response
        finally:
            self.state = SocketState.IDLE
            conn.close()

    def serve_forever(self, host: str = "", port: int = HTTP_SERVER_PORT) -> None:
        """Accept connections on ``host:port`` and answer them one at a time."""
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as listener:
            listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            listener.bind((host, port))
            listener.listen()
            self.server_address = listener.getsockname()
            self.ready.set()
            while True:
                conn, _ = listener.accept()
                try:
                    self.handle_connection(conn)
                except OSError:
                    continue