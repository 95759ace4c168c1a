from __future__ import annotations

import logging
from dataclasses import replace

from app.application.dto.booking_record import to_record
from app.application.exceptions import RemoteError, ValidationError
from app.application.ports.booking_repository import BookingRepositoryPort
from app.application.ports.folder_provisioner import FolderProvisionerPort
from app.application.utils.formatting import project_folder_name
from app.domain.entities.booking import Address, Booking
from app.domain.entities.project_folders import ProjectFolders


class ProjectFoldersUseCase:
    def __init__(self, provisioner: FolderProvisionerPort, repository: BookingRepositoryPort) -> None:
        self._provisioner = provisioner
        self._repository = repository
        self._logger = logging.getLogger(__name__)

    def provision(self, address: Address, client_name: str) -> ProjectFolders:
        if not address.street or not client_name:
            raise ValidationError("Property address and agent name are required")

        folder_name = project_folder_name(address.street, client_name)
        self._logger.info("Creating project folders", extra={"folder": folder_name})
        return self._provisioner.create_project_folders(folder_name)

    def execute(self, booking: Booking) -> tuple[ProjectFolders, Booking]:
        """Provision folders for the booking and persist both links on it."""
        folders = self.provision(booking.address, booking.agent_name)
        updated = replace(
            booking,
            raw_photos_link=folders.raw_photos_link,
            final_edits_link=folders.final_edits_link,
        )
        rows = self._repository.upsert([to_record(updated)])
        if not rows:
            raise RemoteError("No data returned after update")

        self._logger.info("Project folder links saved", extra={"booking_id": booking.id})
        return folders, rows[0]
