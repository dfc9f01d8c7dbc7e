"""A stream socket pair carrying framed messages between two sides."""

from __future__ import annotations

import logging
import selectors
import socket
import threading

from .message import Message, MessageError

log = logging.getLogger(__name__)

_HEADER_SIZE = len(Message(0).encode())


class ChannelError(Exception):
    """Raised when a channel operation fails."""


class ChannelNotPreparedError(ChannelError):
    """Raised when a side is used before it was prepared."""


class ChannelMagicError(ChannelError):
    """Raised when an incoming message header is malformed."""


class SocketReader:
    """The receiving end of a channel."""

    def __init__(self, sock: socket.socket) -> None:
        self._sock = sock
        self._selector: selectors.BaseSelector | None = None

    @property
    def prepared(self) -> bool:
        """Whether prepare() has been called."""
        return self._selector is not None

    def prepare(self) -> None:
        """Switch the socket to non-blocking mode and start watching it."""
        if self._selector is not None:
            return
        self._sock.setblocking(False)
        selector = selectors.DefaultSelector()
        try:
            selector.register(self._sock, selectors.EVENT_READ)
        except (OSError, ValueError) as exc:
            selector.close()
            log.error("registering reader failed since %s", exc)
            raise ChannelError(f"cannot watch reader socket: {exc}") from exc
        self._selector = selector

    def _recv_exact(self, size: int) -> bytes:
        assert self._selector is not None
        buf = bytearray()
        while len(buf) < size:
            try:
                chunk = self._sock.recv(size - len(buf))
            except BlockingIOError:
                self._selector.select()
                continue
            except OSError as exc:
                log.error("read error %s", exc)
                raise ChannelError(f"read failed: {exc}") from exc
            if not chunk:
                raise ChannelError("channel closed by peer")
            buf += chunk
        return bytes(buf)

    def poll_message(self, timeout: float | None = None) -> Message | None:
        """Wait for the next message; return None if *timeout* seconds pass first."""
        if self._selector is None:
            log.error("not prepare on read side")
            raise ChannelNotPreparedError("reader is not prepared")
        if not self._selector.select(timeout):
            return None
        header = self._recv_exact(_HEADER_SIZE)
        try:
            msg_id, length = Message.decode_header(header)
        except MessageError as exc:
            log.error("check magic failed: %s", exc)
            raise ChannelMagicError(str(exc)) from exc
        payload = self._recv_exact(length) if length else b""
        return Message(msg_id, payload)

    def close(self) -> None:
        """Stop watching and close the socket."""
        if self._selector is not None:
            self._selector.close()
            self._selector = None
        self._sock.close()

    def __enter__(self) -> "SocketReader":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class SocketWriter:
    """The sending end of a channel; safe to share between threads."""

    def __init__(self, sock: socket.socket) -> None:
        self._sock = sock
        self._lock = threading.Lock()
        self._prepared = False

    @property
    def prepared(self) -> bool:
        """Whether prepare() has been called."""
        return self._prepared

    def prepare(self) -> None:
        """Make the writer ready for use."""
        self._prepared = True

    def write_message(self, message: Message) -> int:
        """Send *message* whole; return the number of bytes written."""
        if not self._prepared:
            log.error("not prepare on write side")
            raise ChannelNotPreparedError("writer is not prepared")
        if message is None:
            log.error("invalid msg")
            raise ChannelError("invalid message")
        data = message.encode()
        with self._lock:
            try:
                self._sock.sendall(data)
            except OSError as exc:
                log.error("write failed with %s", exc)
                raise ChannelError(f"write failed: {exc}") from exc
        return len(data)

    def close(self) -> None:
        """Close the socket."""
        self._prepared = False
        self._sock.close()

    def __enter__(self) -> "SocketWriter":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class SocketChannel:
    """A connected pair of local stream sockets: one writer end, one reader end."""

    def __init__(self, rmem: int = 0, wmem: int = 0) -> None:
        self.rmem = rmem
        self.wmem = wmem
        self._sockets: tuple[socket.socket, socket.socket] | None = None

    def open(self) -> bool:
        """Create the socket pair, applying buffer sizes when both are non-zero."""
        try:
            pair = socket.socketpair(socket.AF_UNIX, socket.SOCK_STREAM)
        except OSError as exc:
            log.error("make socketpair failed")
            raise ChannelError(f"cannot create socket pair: {exc}") from exc
        if self.wmem and self.rmem:
            for sock in pair:
                sock.setsockopt(socket.SOL_SOCKET, socket.SO_SNDBUF, self.wmem)
                sock.setsockopt(socket.SOL_SOCKET, socket.SO_RCVBUF, self.rmem)
        self._sockets = pair
        for index, (snd, rcv) in enumerate(self.buffer_sizes()):
            log.info("sockets[%d] wmem %d rmem %d", index, snd, rcv)
        return True

    def _pair(self) -> tuple[socket.socket, socket.socket]:
        if self._sockets is None:
            raise ChannelError("channel is not open")
        return self._sockets

    def buffer_sizes(self) -> list[tuple[int, int]]:
        """Return ``(send, receive)`` buffer sizes for the writer and reader ends."""
        return [
            (
                sock.getsockopt(socket.SOL_SOCKET, socket.SO_SNDBUF),
                sock.getsockopt(socket.SOL_SOCKET, socket.SO_RCVBUF),
            )
            for sock in self._pair()
        ]

    def reader(self) -> SocketReader:
        """Return the reading end."""
        return SocketReader(self._pair()[1])

    def writer(self) -> SocketWriter:
        """Return the writing end."""
        return SocketWriter(self._pair()[0])

    def __enter__(self) -> "SocketChannel":
        if self._sockets is None:
            self.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        if self._sockets is not None:
            for sock in self._sockets:
                sock.close()
            self._sockets = None