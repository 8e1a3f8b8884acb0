"""Shared fixtures: a fake HTTP endpoint and resource tree helpers."""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict
from unittest.mock import MagicMock, patch

import pytest


@dataclass
class RecordedCall:
    method: str
    url: str
    headers: Dict[str, str]
    body: str


class FakeEndpoint:
    """Stands in for the remote API behind a patched `httpx.Client`.

    `responder(method, url)` returns a status code, or an exception to raise.
    The default answers 204 to PUT and 201 to POST.
    """

    def __init__(self) -> None:
        self.calls: list[RecordedCall] = []
        self._lock = threading.Lock()
        self.responder: Callable[[str, str], Any] = (
            lambda method, url: 201 if method == "POST" else 204
        )

    def request(self, method, url, headers=None, content=None):
        body = content.decode("utf-8") if isinstance(content, bytes) else str(content or "")
        with self._lock:
            self.calls.append(RecordedCall(method, str(url), dict(headers or {}), body))
        result = self.responder(method, str(url))
        if isinstance(result, Exception):
            raise result
        response = MagicMock()
        response.status_code = result
        return response

    def urls(self, method: str | None = None) -> list[str]:
        return [c.url for c in self.calls if method is None or c.method == method]


@pytest.fixture
def endpoint():
    fake = FakeEndpoint()
    with patch("httpx.Client") as mock_client:
        mock_client.return_value.__enter__.return_value.request.side_effect = fake.request
        fake.client_factory = mock_client
        yield fake


def write_resources(root: Path, files: Dict[str, Any]) -> Path:
    """Write `{relative_path: json_or_text}` below `root`."""

    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        text = content if isinstance(content, str) else json.dumps(content)
        path.write_text(text, encoding="utf-8")
    return root


@pytest.fixture
def resource_root(tmp_path: Path) -> Path:
    root = tmp_path / "resources"
    root.mkdir()
    return root


@pytest.fixture
def write_files(resource_root: Path) -> Callable[[Dict[str, Any]], Path]:
    return lambda files: write_resources(resource_root, files)
