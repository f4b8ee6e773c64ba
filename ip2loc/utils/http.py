from __future__ import annotations

import os
import socket
from typing import Dict, List, Optional, Tuple

import httpx

from ip2loc import __version__


CONNECT_TIMEOUT = 10.0
KEEPALIVE_INTERVAL = 300
IDLE_CONN_TIMEOUT = 90.0
TLS_HANDSHAKE_TIMEOUT = 10.0
RESPONSE_HEADER_TIMEOUT = 10.0
# httpx never sends "Expect: 100-continue"; kept so the full set of bounds lives here
EXPECT_CONTINUE_TIMEOUT = 1.0

_DEFAULT_UA = f"ip2loc/{__version__}"


def _user_agent() -> str:
    value = os.getenv("IP2LOC_USER_AGENT")
    if value:
        ua = value.strip()
        if ua:
            return ua
    return _DEFAULT_UA


def default_headers() -> Dict[str, str]:
    return {
        "User-Agent": _user_agent(),
        "Accept": "application/json",
    }


def keepalive_socket_options() -> List[Tuple[int, int, int]]:
    opts = [(socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1)]
    # idle time before the first keep-alive packet: TCP_KEEPIDLE on Linux, TCP_KEEPALIVE on macOS
    idle_opt = getattr(socket, "TCP_KEEPIDLE", None)
    if idle_opt is None:
        idle_opt = getattr(socket, "TCP_KEEPALIVE", None)
    if idle_opt is not None:
        opts.append((socket.IPPROTO_TCP, idle_opt, KEEPALIVE_INTERVAL))
    # TCP_KEEPINTVL is missing on some platforms (older Windows builds)
    if hasattr(socket, "TCP_KEEPINTVL"):
        opts.append((socket.IPPROTO_TCP, socket.TCP_KEEPINTVL, KEEPALIVE_INTERVAL))
    return opts


def default_timeout() -> httpx.Timeout:
    # httpx folds the TLS handshake into the connect phase
    return httpx.Timeout(
        connect=max(CONNECT_TIMEOUT, TLS_HANDSHAKE_TIMEOUT),
        read=RESPONSE_HEADER_TIMEOUT,
        write=RESPONSE_HEADER_TIMEOUT,
        pool=CONNECT_TIMEOUT,
    )


def default_limits() -> httpx.Limits:
    return httpx.Limits(max_keepalive_connections=20, max_connections=50, keepalive_expiry=IDLE_CONN_TIMEOUT)


def create_transport() -> httpx.AsyncHTTPTransport:
    return httpx.AsyncHTTPTransport(
        retries=0,
        http2=True,
        limits=default_limits(),
        socket_options=keepalive_socket_options(),
    )


def create_client(transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        headers=default_headers(),
        http2=True,
        timeout=default_timeout(),
        limits=default_limits(),
        transport=transport if transport is not None else create_transport(),
        verify=True,
    )
