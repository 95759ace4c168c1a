from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ProjectFolders:
    folder_path: str
    raw_photos_link: str
    final_edits_link: str
