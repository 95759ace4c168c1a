from __future__ import annotations

import logging
from typing import Any

import httpx

from app.application.exceptions import RemoteError
from app.application.ports.folder_provisioner import FolderProvisionerPort
from app.core.config import settings
from app.domain.entities.project_folders import ProjectFolders


DROPBOX_API_BASE = "https://api.dropboxapi.com/2"
DROPBOX_TOKEN_URL = "https://api.dropboxapi.com/oauth2/token"

RAW_SUBFOLDER = "Raw Brackets"
EDITED_SUBFOLDER = "Edited Media"


class DropboxClient(FolderProvisionerPort):
    def __init__(
        self,
        access_token: str | None = None,
        client_id: str | None = None,
        client_secret: str | None = None,
        refresh_token: str | None = None,
        redirect_uri: str | None = None,
        projects_root: str | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._access_token = access_token or settings.DROPBOX_ACCESS_TOKEN
        self._client_id = client_id or settings.DROPBOX_CLIENT_ID
        self._client_secret = client_secret or settings.DROPBOX_CLIENT_SECRET
        self._refresh_token = refresh_token or settings.DROPBOX_REFRESH_TOKEN
        self._redirect_uri = redirect_uri or settings.DROPBOX_REDIRECT_URI
        self._projects_root = (projects_root or settings.DROPBOX_PROJECTS_ROOT).rstrip("/")
        self._client = client or httpx.Client(timeout=settings.HTTP_TIMEOUT_SECONDS)
        self._logger = logging.getLogger(__name__)

    # Folder provisioning

    def create_project_folders(self, folder_name: str) -> ProjectFolders:
        if not self._access_token and not self._refresh_token:
            raise RemoteError("Dropbox access token is not configured")

        main_path = f"{self._projects_root}/{folder_name}"
        raw_path = f"{main_path}/{RAW_SUBFOLDER}"
        edited_path = f"{main_path}/{EDITED_SUBFOLDER}"

        for path in (main_path, raw_path, edited_path):
            self._create_folder_if_missing(path)

        folders = ProjectFolders(
            folder_path=main_path,
            raw_photos_link=self._shared_link(raw_path),
            final_edits_link=self._shared_link(edited_path),
        )
        self._logger.info("Folders created", extra={"path": main_path})
        return folders

    def _create_folder_if_missing(self, path: str) -> None:
        resp = self._api("files/create_folder_v2", {"path": path, "autorename": False})
        if resp.status_code == 409:
            self._logger.info("Folder already exists", extra={"path": path})
            return
        self._raise_for_error(resp, "create folder")
        self._logger.info("Created folder", extra={"path": path})

    def _shared_link(self, path: str) -> str:
        resp = self._api("sharing/create_shared_link_with_settings", {"path": path})
        if resp.status_code == 409:
            existing = self._existing_link(resp, path)
            if existing:
                return existing
        self._raise_for_error(resp, "create shared link")
        return resp.json()["url"]

    def _existing_link(self, resp: httpx.Response, path: str) -> str | None:
        try:
            error = resp.json().get("error", {})
        except Exception:
            return None
        if error.get(".tag") != "shared_link_already_exists":
            return None
        metadata = (error.get("shared_link_already_exists") or {}).get("metadata") or {}
        if metadata.get("url"):
            return metadata["url"]

        listed = self._api("sharing/list_shared_links", {"path": path, "direct_only": True})
        self._raise_for_error(listed, "list shared links")
        links = listed.json().get("links") or []
        return links[0]["url"] if links else None

    # OAuth

    def refresh_access_token(self) -> str:
        if not self._refresh_token:
            raise RemoteError("Dropbox refresh token is not configured")
        tokens = self._token_request(
            {"grant_type": "refresh_token", "refresh_token": self._refresh_token},
            action="refresh token",
        )
        self._access_token = tokens["access_token"]
        self._logger.info("Dropbox access token refreshed")
        return self._access_token

    def exchange_code(self, code: str) -> dict[str, Any]:
        return self._token_request(
            {
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self._redirect_uri or "",
            },
            action="complete OAuth flow",
        )

    def _token_request(self, data: dict[str, str], action: str) -> dict[str, Any]:
        try:
            resp = self._client.post(
                DROPBOX_TOKEN_URL,
                data=data,
                auth=(self._client_id or "", self._client_secret or ""),
            )
        except httpx.HTTPError as e:
            self._logger.error(f"Dropbox {action} failed", extra={"error": str(e)})
            raise RemoteError(f"Failed to {action}") from e
        self._raise_for_error(resp, action)
        tokens = resp.json()
        if not tokens.get("access_token"):
            raise RemoteError(f"Failed to {action}")
        return tokens

    # Transport

    def _api(self, endpoint: str, payload: dict[str, Any]) -> httpx.Response:
        if not self._access_token:
            self.refresh_access_token()

        resp = self._post(endpoint, payload)
        if resp.status_code == 401 and self._refresh_token:
            self._logger.info("Token is expired or invalid, attempting to refresh")
            self.refresh_access_token()
            resp = self._post(endpoint, payload)
        return resp

    def _post(self, endpoint: str, payload: dict[str, Any]) -> httpx.Response:
        try:
            return self._client.post(
                f"{DROPBOX_API_BASE}/{endpoint}",
                json=payload,
                headers={"Authorization": f"Bearer {self._access_token}"},
            )
        except httpx.HTTPError as e:
            self._logger.error("Dropbox API error", extra={"error": str(e), "path": endpoint})
            raise RemoteError(str(e)) from e

    def _raise_for_error(self, resp: httpx.Response, action: str) -> None:
        if resp.status_code < 400:
            return
        try:
            body = resp.json()
            message = body.get("error_summary") or body.get("error_description") or resp.text
        except Exception:
            message = resp.text
        self._logger.error(
            f"Dropbox {action} failed",
            extra={"status": resp.status_code, "error": message},
        )
        raise RemoteError(message or f"Failed to {action}", status_code=resp.status_code)
