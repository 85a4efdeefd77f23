"""Parsing listen endpoints and opening listening sockets."""

from __future__ import annotations

import os
import socket
from collections.abc import Callable


def parse_endpoint(ep: str) -> tuple[str, str]:
    """Split ``unix://path`` or ``tcp://host:port`` into protocol and address.

    Anything without one of those prefixes is taken as a Unix socket path.
    """
    lowered = ep.lower()
    if lowered.startswith("unix://") or lowered.startswith("tcp://"):
        proto, addr = ep.split("://", 1)
        if addr:
            return proto, addr
        raise ValueError(f"Invalid endpoint: {ep}")
    return "unix", ep


def _split_host_port(addr: str) -> tuple[str, int, socket.AddressFamily]:
    host, sep, port = addr.rpartition(":")
    if not sep:
        raise ValueError(f"missing port in address {addr!r}")
    family = socket.AF_INET
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
        family = socket.AF_INET6
    try:
        port_number = int(port)
    except ValueError:
        raise ValueError(f"invalid port in address {addr!r}") from None
    return host, port_number, family


def listen(endpoint: str) -> tuple[socket.socket, Callable[[], None]]:
    """Open a listening socket for ``endpoint``.

    Returns the socket and a cleanup function; for Unix sockets the cleanup
    removes the socket file. A stale socket file is removed before binding.
    """
    proto, addr = parse_endpoint(endpoint)

    if proto == "unix":
        path = "/" + addr
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as exc:
            raise OSError(f"{path}: {exc}") from exc

        def cleanup() -> None:
            try:
                os.remove(path)
            except OSError:
                pass

        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.bind(path)
            sock.listen()
        except OSError:
            sock.close()
            raise
        return sock, cleanup

    host, port, family = _split_host_port(addr)
    sock = socket.create_server((host, port), family=family)
    return sock, lambda: None