"""Tests for the HTTP command client."""

from __future__ import annotations

import json
import logging
import time
from unittest.mock import MagicMock, patch

import httpx
import pytest

from cmdlink.client.http_client import ClientState, CommandClient
from cmdlink.config.settings import ServiceConfig
from cmdlink.endpoint.resolver import Endpoint, EndpointResolver


@pytest.fixture
def endpoint() -> Endpoint:
    return Endpoint(host="127.0.0.1", port=1242, path="ASF")


def _mock_transport(handler) -> httpx.MockTransport:
    return httpx.MockTransport(handler)


class TestCommandClientInit:
    def test_defaults(self, endpoint: Endpoint) -> None:
        client = CommandClient(endpoint)
        assert client._timeout == 300.0
        assert client.state is ClientState.UNCONNECTED

    def test_requires_endpoint_or_resolver(self) -> None:
        with pytest.raises(ValueError):
            CommandClient()


class TestCommandClientSend:
    @pytest.mark.parametrize("text", ["", None])
    def test_empty_input_never_connects(
        self, endpoint: Endpoint, text, caplog: pytest.LogCaptureFixture
    ) -> None:
        client = CommandClient(endpoint)
        with patch("cmdlink.client.http_client.httpx.Client") as http_cls:
            assert client.send(text) is None
        http_cls.assert_not_called()
        assert client.state is ClientState.UNCONNECTED
        assert "input is null or empty" in caplog.text

    def test_send_posts_command(self, endpoint: Endpoint) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"output": "Bot is running."})

        client = CommandClient(endpoint)
        client._client = httpx.Client(
            base_url=endpoint.url + "/", transport=_mock_transport(handler)
        )
        assert client.send("status") == "Bot is running."
        assert str(seen[0].url) == "http://127.0.0.1:1242/ASF/HandleCommand"
        assert seen[0].method == "POST"
        assert json.loads(seen[0].content) == {"input": "status"}

    def test_null_output(self, endpoint: Endpoint) -> None:
        client = CommandClient(endpoint)
        client._client = httpx.Client(
            base_url=endpoint.url + "/",
            transport=_mock_transport(lambda r: httpx.Response(200, json={"output": None})),
        )
        assert client.send("status") is None

    def test_server_error_becomes_none(
        self, endpoint: Endpoint, caplog: pytest.LogCaptureFixture
    ) -> None:
        client = CommandClient(endpoint)
        client._client = httpx.Client(
            base_url=endpoint.url + "/",
            transport=_mock_transport(lambda r: httpx.Response(500, text="boom")),
        )
        assert client.send("status") is None
        assert any(r.levelno == logging.ERROR for r in caplog.records)

    def test_connection_is_reused(self, endpoint: Endpoint) -> None:
        client = CommandClient(endpoint)
        with patch("cmdlink.client.http_client.httpx.Client") as http_cls:
            http_cls.return_value.post.return_value.json.return_value = {"output": "ok"}
            client.send("one")
            client.send("two")
        http_cls.assert_called_once()
        assert http_cls.return_value.post.call_count == 2
        assert client.state is ClientState.CONNECTED

    def test_timeout_passed_to_transport(self, endpoint: Endpoint) -> None:
        client = CommandClient(endpoint, timeout=12.0)
        with patch("cmdlink.client.http_client.httpx.Client") as http_cls:
            client.send("status")
        assert http_cls.call_args.kwargs["timeout"] == 12.0
        assert http_cls.call_args.kwargs["base_url"] == "http://127.0.0.1:1242/ASF/"

    def test_unreachable_host_returns_none(self, unused_port: int) -> None:
        endpoint = Endpoint(host="127.0.0.1", port=unused_port, path="ASF")
        client = CommandClient(endpoint, timeout=2.0)
        started = time.monotonic()
        assert client.send("status") is None
        assert time.monotonic() - started < 2.5
        client.close()

    def test_resolves_endpoint_lazily(self) -> None:
        resolver = EndpointResolver(ServiceConfig(host="10.1.1.1", port=3000))
        client = CommandClient(resolver=resolver)
        assert client.endpoint is None
        with patch("cmdlink.client.http_client.httpx.Client"):
            client.send("status")
        assert client.endpoint.url == "http://10.1.1.1:3000/ASF"

    def test_incomplete_configuration_returns_none(self) -> None:
        resolver = EndpointResolver(ServiceConfig(host=""), prompt=MagicMock(return_value=""))
        client = CommandClient(resolver=resolver)
        with patch("cmdlink.client.http_client.httpx.Client") as http_cls:
            assert client.send("status") is None
        http_cls.assert_not_called()

    def test_empty_path_returns_none(self) -> None:
        client = CommandClient(resolver=EndpointResolver(ServiceConfig(port=1, path="/")))
        with patch("cmdlink.client.http_client.httpx.Client") as http_cls:
            assert client.send("status") is None
            assert client.get_status() is None
        http_cls.assert_not_called()
        assert client.state is ClientState.UNCONNECTED

    def test_send_attempt_logged_before_resolution(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        resolver = EndpointResolver(ServiceConfig(host=""), prompt=MagicMock(return_value=""))
        client = CommandClient(resolver=resolver)
        with caplog.at_level(logging.INFO, logger="cmdlink.client.http_client"):
            assert client.send("status") is None
        assert "Sending command: status to command server on unresolved endpoint..." in caplog.text

    def test_send_logs_known_endpoint(
        self, endpoint: Endpoint, caplog: pytest.LogCaptureFixture
    ) -> None:
        client = CommandClient(endpoint)
        with patch("cmdlink.client.http_client.httpx.Client"):
            with caplog.at_level(logging.INFO, logger="cmdlink.client.http_client"):
                client.send("status")
        assert "Sending command: status to command server on http://127.0.0.1:1242/ASF..." in caplog.text


class TestCommandClientStatus:
    def test_get_status(self, endpoint: Endpoint) -> None:
        client = CommandClient(endpoint)
        client._client = httpx.Client(
            base_url=endpoint.url + "/",
            transport=_mock_transport(lambda r: httpx.Response(200, json={"status": "{}"})),
        )
        assert client.get_status() == "{}"

    def test_get_status_failure(self, unused_port: int) -> None:
        endpoint = Endpoint(host="127.0.0.1", port=unused_port, path="ASF")
        with CommandClient(endpoint, timeout=2.0) as client:
            assert client.get_status() is None


class TestCommandClientClose:
    def test_close_without_connection(self, endpoint: Endpoint) -> None:
        client = CommandClient(endpoint)
        client.close()
        assert client.state is ClientState.UNCONNECTED

    def test_close_twice(self, endpoint: Endpoint) -> None:
        client = CommandClient(endpoint)
        with patch("cmdlink.client.http_client.httpx.Client") as http_cls:
            client.send("status")
            client.close()
            client.close()
        http_cls.return_value.close.assert_called_once()
        assert client.state is ClientState.CLOSED

    def test_send_after_close_reconnects(self, endpoint: Endpoint) -> None:
        client = CommandClient(endpoint)
        with patch("cmdlink.client.http_client.httpx.Client") as http_cls:
            client.send("one")
            client.close()
            client.send("two")
        assert http_cls.call_count == 2
        assert client.state is ClientState.CONNECTED

    def test_context_manager_closes(self, endpoint: Endpoint) -> None:
        with patch("cmdlink.client.http_client.httpx.Client") as http_cls:
            with CommandClient(endpoint) as client:
                client.send("status")
        http_cls.return_value.close.assert_called_once()
