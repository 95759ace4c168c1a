from __future__ import annotations

import logging
from urllib.parse import quote

from app.application.ports.folder_provisioner import FolderProvisionerPort
from app.domain.entities.project_folders import ProjectFolders


class MockFolderProvisioner(FolderProvisionerPort):
    def __init__(self, projects_root: str = "/Projects") -> None:
        self._projects_root = projects_root.rstrip("/")
        self.created: list[str] = []
        self._logger = logging.getLogger(__name__)

    def create_project_folders(self, folder_name: str) -> ProjectFolders:
        path = f"{self._projects_root}/{folder_name}"
        self.created.append(path)
        self._logger.info("Mock folder creation", extra={"path": path})
        base = f"https://www.dropbox.com/mock{quote(path)}"
        return ProjectFolders(
            folder_path=path,
            raw_photos_link=f"{base}/Raw%20Brackets",
            final_edits_link=f"{base}/Edited%20Media",
        )
