"""UDP broadcast agent for the monitor port."""

from __future__ import annotations

import logging
import socket

log = logging.getLogger(__name__)

BROADCAST_ADDRESS = "255.255.255.255"
DEFAULT_MESSAGE_SIZE = 4096


class NetError(OSError):
    """Raised when a network operation fails."""


class UDPAgent:
    """Receives datagrams on a UDP port and broadcasts datagrams to it."""

    def __init__(
        self,
        port: int,
        *,
        message_size: int = DEFAULT_MESSAGE_SIZE,
        broadcast_address: str = BROADCAST_ADDRESS,
        timeout: float | None = None,
    ) -> None:
        self.port = port
        self.message_size = message_size
        self.broadcast_address = broadcast_address
        self.timeout = timeout
        self._recv_socket: socket.socket | None = None
        self._send_socket: socket.socket | None = None

    @property
    def recv_address(self) -> tuple[str, int]:
        """Local address the receiving socket is bound to."""
        if self._recv_socket is None:
            raise NetError("receive side is not prepared")
        return self._recv_socket.getsockname()

    def prepare_recv(self) -> None:
        """Bind a receiving socket to the port on all interfaces."""
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        except OSError as exc:
            log.error("create socket failed since %s", exc)
            raise NetError(f"create socket failed: {exc}") from exc
        try:
            sock.bind(("", self.port))
        except OSError as exc:
            sock.close()
            log.error("failed to bind socket to local addr")
            raise NetError(f"failed to bind socket to port {self.port}: {exc}") from exc
        sock.settimeout(self.timeout)
        self._recv_socket = sock

    def prepare_send(self) -> None:
        """Create a broadcast-capable sending socket."""
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        except OSError as exc:
            log.error("failed to create send socket since %s", exc)
            raise NetError(f"failed to create send socket: {exc}") from exc
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        except OSError as exc:
            sock.close()
            log.error("failed to set send sock to broadcast since %s", exc)
            raise NetError(f"failed to enable broadcast: {exc}") from exc
        self._send_socket = sock

    def poll_message(self) -> bytes:
        """Wait for one datagram and return its contents."""
        if self._recv_socket is None:
            raise NetError("receive side is not prepared")
        try:
            data, _ = self._recv_socket.recvfrom(self.message_size)
        except OSError as exc:
            log.error("recv from broadcast failed since %s", exc)
            raise NetError(f"receive failed: {exc}") from exc
        if not data:
            log.error("recv from broadcast returned no data")
            raise NetError("received an empty datagram")
        return data

    def send_message(self, payload: bytes) -> int:
        """Broadcast *payload*; return the number of bytes sent, 0 on failure."""
        if self._send_socket is None:
            raise NetError("send side is not prepared")
        try:
            sent = self._send_socket.sendto(bytes(payload), (self.broadcast_address, self.port))
        except OSError as exc:
            log.error("send broadcast failed since %s", exc)
            return 0
        if sent <= 0:
            log.error("send broadcast sent nothing")
        return sent

    def close(self) -> None:
        """Close both sockets."""
        for sock in (self._recv_socket, self._send_socket):
            if sock is not None:
                sock.close()
        self._recv_socket = None
        self._send_socket = None

    def __enter__(self) -> "UDPAgent":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()