from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.entities.project_folders import ProjectFolders


class FolderProvisionerPort(ABC):
    @abstractmethod
    def create_project_folders(self, folder_name: str) -> ProjectFolders:
        """
        Create the project folder with its raw/edited subfolders (existing folders are reused)
        and return shareable links for both subfolders.
        """
        raise NotImplementedError
