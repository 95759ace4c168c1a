"""
Tests for Dropbox project folder provisioning.
"""

from __future__ import annotations

import json

import httpx
import pytest

from app.application.exceptions import RemoteError
from app.infrastructure.dropbox.dropbox_client import DropboxClient


def _client(handler, **kwargs) -> DropboxClient:
    params = {
        "access_token": "token",
        "client_id": "app-key",
        "client_secret": "app-secret",
        "refresh_token": "refresh",
        "projects_root": "/Projects",
    }
    params.update(kwargs)
    return DropboxClient(client=httpx.Client(transport=httpx.MockTransport(handler)), **params)


def _link(path: str) -> str:
    return f"https://www.dropbox.com/scl/fo{path.replace(' ', '_')}"


def test_creates_three_folders_and_two_links():
    """Main, raw and edited folders are created and the two subfolders shared."""
    created: list[str] = []
    shared: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if request.url.path.endswith("/files/create_folder_v2"):
            created.append(body["path"])
            return httpx.Response(200, json={"metadata": {"path_display": body["path"]}})
        if request.url.path.endswith("/sharing/create_shared_link_with_settings"):
            shared.append(body["path"])
            return httpx.Response(200, json={"url": _link(body["path"])})
        raise AssertionError(request.url)

    folders = _client(handler).create_project_folders("12 Main St - Jane Doe")

    assert created == [
        "/Projects/12 Main St - Jane Doe",
        "/Projects/12 Main St - Jane Doe/Raw Brackets",
        "/Projects/12 Main St - Jane Doe/Edited Media",
    ]
    assert shared == created[1:]
    assert folders.folder_path == "/Projects/12 Main St - Jane Doe"
    assert folders.raw_photos_link == _link("/Projects/12 Main St - Jane Doe/Raw Brackets")
    assert folders.final_edits_link == _link("/Projects/12 Main St - Jane Doe/Edited Media")


def test_existing_folders_and_links_are_reused():
    """A folder conflict is tolerated and an existing shared link is returned."""

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if request.url.path.endswith("/files/create_folder_v2"):
            return httpx.Response(409, json={"error_summary": "path/conflict/folder/"})
        if request.url.path.endswith("/sharing/create_shared_link_with_settings"):
            if body["path"].endswith("Raw Brackets"):
                return httpx.Response(
                    409,
                    json={
                        "error": {
                            ".tag": "shared_link_already_exists",
                            "shared_link_already_exists": {"metadata": {"url": "https://db/raw"}},
                        }
                    },
                )
            return httpx.Response(
                409,
                json={"error": {".tag": "shared_link_already_exists"}},
            )
        if request.url.path.endswith("/sharing/list_shared_links"):
            return httpx.Response(200, json={"links": [{"url": "https://db/edited"}]})
        raise AssertionError(request.url)

    folders = _client(handler).create_project_folders("Job")

    assert folders.raw_photos_link == "https://db/raw"
    assert folders.final_edits_link == "https://db/edited"


def test_expired_token_is_refreshed_once():
    """A 401 triggers a token refresh and one retry with the new token."""
    auth_headers: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/oauth2/token":
            return httpx.Response(200, json={"access_token": "fresh"})
        auth_headers.append(request.headers["Authorization"])
        if request.headers["Authorization"] == "Bearer stale":
            return httpx.Response(401, json={"error_summary": "expired_access_token/"})
        body = json.loads(request.content)
        if request.url.path.endswith("/files/create_folder_v2"):
            return httpx.Response(200, json={})
        return httpx.Response(200, json={"url": _link(body["path"])})

    client = _client(handler, access_token="stale")
    client.create_project_folders("Job")

    assert auth_headers[:2] == ["Bearer stale", "Bearer fresh"]
    assert all(h == "Bearer fresh" for h in auth_headers[1:])


def test_api_failure_raises_remote_error():
    """Other Dropbox errors surface their summary."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"error_summary": "path/malformed_path/"})

    with pytest.raises(RemoteError, match="malformed_path"):
        _client(handler).create_project_folders("Job")


def test_unconfigured_client_refuses():
    """Without any token there is nothing to call with."""
    client = _client(lambda r: httpx.Response(500), access_token=None, refresh_token=None)

    with pytest.raises(RemoteError):
        client.create_project_folders("Job")
