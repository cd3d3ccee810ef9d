import json

import pytest
import requests

from reunion.core.config import build_settings


class FakeResponse:
    """Just enough of requests.Response for the fetchers."""
    def __init__(self, status=200, body=None, text=None, reason="OK"):
        self.status_code = status
        self._body = body
        self.text = text if text is not None else (json.dumps(body) if body is not None else "")
        self.reason = reason

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._body is None:
            raise ValueError("no JSON body")
        return self._body


class FakeSession:
    """
    requests-style session. `routes` maps a URL substring to a list of
    responses (or exceptions) handed out in order.
    """
    def __init__(self, routes):
        self.routes = {k: list(v) for k, v in routes.items()}
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, dict(params or {})))
        for key, queue in self.routes.items():
            if key in url:
                r = queue.pop(0)
                if isinstance(r, Exception):
                    raise r
                return r
        raise requests.ConnectionError(f"no fake route for {url}")

    def close(self):
        pass


def drive_file(i, mime="image/jpeg", **extra):
    f = {
        "id": f"file-{i}",
        "name": f"IMG_{i:04d}.jpg",
        "mimeType": mime,
        "webContentLink": f"https://drive.google.com/uc?id=file-{i}&export=download",
        "thumbnailLink": f"https://lh3.googleusercontent.com/drive-storage/abc{i}=s220",
        "createdTime": "2024-07-10T20:08:42.000Z",
        "size": "2048",
    }
    f.update(extra)
    return f


def gviz_text(payload):
    return "/*O_o*/\ngoogle.visualization.Query.setResponse(" + json.dumps(payload) + ");"


def gviz_row(*values):
    return {"c": [None if v is None else {"v": v} for v in values]}


@pytest.fixture
def fake_session():
    return FakeSession


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture
def make_drive_file():
    return drive_file


@pytest.fixture
def make_gviz():
    return gviz_text, gviz_row


@pytest.fixture
def settings(tmp_path):
    cfg = {
        "google": {"api_key": "test-key", "drive_folder_id": "folder-1", "sheet_id": "sheet-1"},
        "ratelimit": {"limit": 3, "window_seconds": 60},
        "http": {"allowed_origins": ["localhost"]},
        "conversations": {"path": str(tmp_path / "funny_conversations.json")},
    }
    return build_settings(cfg, environ={})
