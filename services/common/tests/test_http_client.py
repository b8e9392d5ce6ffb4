import logging

import httpx
from unittest.mock import patch

from services.common.core.config import BaseAppConfig
from services.common.core.http_client import HttpClientFactory


class TestHttpClientFactory:
    @patch("httpx.AsyncClient")
    def test_create_async_client_verify_false(self, mock_client):
        """VERIFY_SSL=False should produce client with verify=False"""
        factory = HttpClientFactory(BaseAppConfig(VERIFY_SSL=False))
        factory.create_async_client()

        mock_client.assert_called_once()
        _, kwargs = mock_client.call_args
        assert kwargs["verify"] is False
        assert kwargs["trust_env"] is False

    @patch("httpx.AsyncClient")
    def test_create_async_client_verify_true(self, mock_client):
        factory = HttpClientFactory(BaseAppConfig(VERIFY_SSL=True))
        factory.create_async_client()

        _, kwargs = mock_client.call_args
        assert kwargs["verify"] is True

    @patch("httpx.AsyncClient")
    def test_explicit_verify_wins(self, mock_client):
        factory = HttpClientFactory(BaseAppConfig(VERIFY_SSL=True))
        factory.create_async_client(verify=False)

        _, kwargs = mock_client.call_args
        assert kwargs["verify"] is False

    @patch("httpx.AsyncClient")
    def test_limits_from_config(self, mock_client):
        config = BaseAppConfig(HTTP_MAX_CONNECTIONS=7, HTTP_MAX_KEEPALIVE=3)
        HttpClientFactory(config).create_async_client()

        _, kwargs = mock_client.call_args
        limits = kwargs["limits"]
        assert isinstance(limits, httpx.Limits)
        assert limits.max_connections == 7
        assert limits.max_keepalive_connections == 3

    @patch("httpx.AsyncClient")
    def test_limits_override(self, mock_client):
        custom_limits = httpx.Limits(max_connections=500)
        HttpClientFactory(BaseAppConfig()).create_async_client(limits=custom_limits)

        _, kwargs = mock_client.call_args
        assert kwargs["limits"] == custom_limits

    @patch("httpx.AsyncClient")
    def test_disabled_verification_is_logged(self, mock_client, caplog):
        with caplog.at_level(logging.WARNING, logger="services.common.core.http_client"):
            HttpClientFactory(BaseAppConfig(VERIFY_SSL=False)).create_async_client()

        assert any("VERIFY_SSL=False" in r.getMessage() for r in caplog.records)

    @patch("httpx.AsyncClient")
    def test_enabled_verification_is_not_logged(self, mock_client, caplog):
        with caplog.at_level(logging.WARNING, logger="services.common.core.http_client"):
            HttpClientFactory(BaseAppConfig(VERIFY_SSL=True)).create_async_client()

        assert not caplog.records
