"""Unit tests for UpsertClient using a mocked httpx.Client."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import httpx
import pytest

from tenant_loader.core.errors import UpsertError
from tenant_loader.libs.http.upsert_client import UpsertClient, forwarded_headers


def make_response(status_code: int = 204) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    return response


class TestForwardedHeaders:
    def test_keeps_only_x_headers(self):
        headers = forwarded_headers(
            {
                "X-Okapi-Tenant": "diku",
                "x-okapi-token": "token",
                "Authorization": "Bearer secret",
                "Content-Length": "12",
            }
        )
        assert headers == {
            "X-Okapi-Tenant": "diku",
            "x-okapi-token": "token",
            "Content-Type": "application/json",
            "Accept": "application/json, text/plain",
        }

    def test_none_headers(self):
        assert forwarded_headers(None) == {
            "Content-Type": "application/json",
            "Accept": "application/json, text/plain",
        }


class TestUpsertClient:
    def test_default_timeout(self):
        assert UpsertClient().timeout == 30.0

    def test_custom_timeout_is_passed_to_httpx(self):
        with patch("httpx.Client") as mock_client:
            with UpsertClient(timeout=5):
                pass
            mock_client.assert_called_once_with(timeout=5.0)

    def test_send_returns_status(self):
        with patch("httpx.Client") as mock_client:
            request = mock_client.return_value.__enter__.return_value.request
            request.return_value = make_response(201)

            with UpsertClient({"X-Okapi-Tenant": "diku"}) as client:
                status = client.send("PUT", "http://okapi/groups/a", '{"id": "a"}')

            assert status == 201
            call_args = request.call_args
            assert call_args.args == ("PUT", "http://okapi/groups/a")
            assert call_args.kwargs["content"] == b'{"id": "a"}'
            assert call_args.kwargs["headers"]["X-Okapi-Tenant"] == "diku"

    def test_client_closed_on_exit(self):
        with patch("httpx.Client") as mock_client:
            with UpsertClient():
                pass
            mock_client.return_value.__exit__.assert_called_once()

    @pytest.mark.parametrize(
        "error",
        [
            httpx.ConnectError("Connection refused"),
            httpx.ReadTimeout("timed out"),
        ],
    )
    def test_transport_errors_become_upsert_error(self, error):
        with patch("httpx.Client") as mock_client:
            mock_client.return_value.__enter__.return_value.request.side_effect = error

            with UpsertClient() as client:
                with pytest.raises(UpsertError) as excinfo:
                    client.send("POST", "http://okapi/groups", "{}")

        assert excinfo.value.method == "POST"
        assert excinfo.value.status_code is None
        assert str(excinfo.value) == f"POST http://okapi/groups: {error}"

    def test_send_requires_open_client(self):
        with pytest.raises(RuntimeError, match="not open"):
            UpsertClient().send("PUT", "http://okapi/x", "{}")

    def test_unencodable_body_becomes_upsert_error(self):
        with patch("httpx.Client") as mock_client:
            request = mock_client.return_value.__enter__.return_value.request

            with UpsertClient() as client:
                with pytest.raises(UpsertError, match="Encoding of body failed"):
                    client.send("PUT", "http://okapi/users/u1", '{"name": "\ud800"}')

            request.assert_not_called()
