"""Tests for the HTTP client factory and the JSON logger."""

from __future__ import annotations

import io
import json
import socket

import pytest

from ip2loc.utils import http
from ip2loc.utils.logging import logger, set_stream


class TestHttp:
    def test_default_headers(self) -> None:
        headers = http.default_headers()
        assert headers["Accept"] == "application/json"
        assert headers["User-Agent"].startswith("ip2loc/")

    def test_user_agent_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("IP2LOC_USER_AGENT", "  custom-agent/1.0 ")
        assert http.default_headers()["User-Agent"] == "custom-agent/1.0"

    def test_timeouts(self) -> None:
        timeout = http.default_timeout()
        assert timeout.connect == 10.0
        assert timeout.connect >= http.TLS_HANDSHAKE_TIMEOUT
        assert timeout.read == 10.0
        assert timeout.pool == 10.0

    def test_keepalive_enabled(self) -> None:
        opts = http.keepalive_socket_options()
        assert (socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1) in opts

    @pytest.mark.skipif(not hasattr(socket, "TCP_KEEPIDLE"), reason="platform lacks TCP_KEEPIDLE")
    def test_keepalive_idle_time(self) -> None:
        opts = http.keepalive_socket_options()
        assert (socket.IPPROTO_TCP, socket.TCP_KEEPIDLE, 300) in opts

    @pytest.mark.skipif(not hasattr(socket, "TCP_KEEPINTVL"), reason="platform lacks TCP_KEEPINTVL")
    def test_keepalive_resend_interval(self) -> None:
        opts = http.keepalive_socket_options()
        assert (socket.IPPROTO_TCP, socket.TCP_KEEPINTVL, 300) in opts

    def test_idle_connection_expiry(self) -> None:
        assert http.default_limits().keepalive_expiry == 90.0

    @pytest.mark.asyncio
    async def test_transport_carries_bounds(self) -> None:
        transport = http.create_transport()
        try:
            pool = transport._pool
            assert pool._keepalive_expiry == 90.0
            assert list(pool._socket_options) == http.keepalive_socket_options()
        finally:
            await transport.aclose()

    @pytest.mark.asyncio
    async def test_create_client(self) -> None:
        client = http.create_client()
        try:
            assert client.timeout.connect == 10.0
            assert client.headers["Accept"] == "application/json"
        finally:
            await client.aclose()


class TestLogger:
    def test_writes_json_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        logger("test")["warn"]("something odd", ip="1.2.3.4")

        captured = capsys.readouterr()
        assert captured.out == ""
        record = json.loads(captured.err)
        assert record["level"] == "WARN"
        assert record["module"] == "test"
        assert record["ip"] == "1.2.3.4"

    def test_respects_min_level(self, capsys: pytest.CaptureFixture[str]) -> None:
        logger("test")["debug"]("hidden")
        assert capsys.readouterr().err == ""

    def test_redacts_access_key(self, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("IP2LOC_LOG_LEVEL", "10")

        logger("test")["debug"]("request", access_key="super-secret")

        err = capsys.readouterr().err
        assert "super-secret" not in err
        assert json.loads(err)["access_key"] == "***"

    def test_redirected_stream(self, capsys: pytest.CaptureFixture[str]) -> None:
        sink = io.StringIO()
        set_stream(sink)
        try:
            logger("test")["warn"]("to the sink")
        finally:
            set_stream(None)

        assert capsys.readouterr().err == ""
        assert json.loads(sink.getvalue())["message"] == "to the sink"
