from functools import lru_cache
import logging

from app.core.config import settings
from app.application.ports.booking_repository import BookingRepositoryPort
from app.application.ports.email_sender import EmailSenderPort
from app.application.ports.folder_provisioner import FolderProvisionerPort
from app.application.ports.service_catalog import ServiceCatalogPort
from app.application.use_cases.edit_session import BookingEditSession
from app.application.use_cases.polling import PollingSynchronizer
from app.application.use_cases.project_folders import ProjectFoldersUseCase
from app.application.use_cases.send_email import SendEmailUseCase
from app.application.use_cases.table_editor import TableAggregateEditor
from app.domain.entities.booking import Booking
from app.infrastructure.dropbox.dropbox_client import DropboxClient
from app.infrastructure.dropbox.mock_folders import MockFolderProvisioner
from app.infrastructure.google.gmail_sender import GmailSender
from app.infrastructure.google.mock_email import MockEmailSender
from app.infrastructure.google.oauth_client import GoogleOAuthClient
from app.infrastructure.knowledge.service_catalog_store import ServiceCatalogStore
from app.infrastructure.store.json_store import JsonBookingRepository
from app.infrastructure.store.memory_store import MemoryBookingRepository
from app.infrastructure.supabase.supabase_repository import SupabaseBookingRepository


logger = logging.getLogger(__name__)

_booking_repository: BookingRepositoryPort | None = None
_synchronizer: PollingSynchronizer | None = None


def _is_local() -> bool:
    return settings.ENV.lower() in {"dev", "local"}


def get_booking_repository() -> BookingRepositoryPort:
    global _booking_repository
    if _booking_repository is None:
        provider = settings.STORE_PROVIDER.lower()
        if not provider:
            if settings.SUPABASE_URL and settings.SUPABASE_SERVICE_ROLE_KEY:
                provider = "supabase"
            elif _is_local():
                provider = "json"
            else:
                raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY are required outside dev/local.")

        logger.info("Using booking store", extra={"provider": provider})
        if provider == "supabase":
            _booking_repository = SupabaseBookingRepository()
        elif provider == "json":
            _booking_repository = JsonBookingRepository(data_dir=settings.DATA_DIR)
        elif provider == "memory":
            _booking_repository = MemoryBookingRepository()
        else:
            raise ValueError(f"Unknown STORE_PROVIDER: {settings.STORE_PROVIDER}")
    return _booking_repository


@lru_cache
def get_service_catalog() -> ServiceCatalogPort:
    return ServiceCatalogStore()


@lru_cache
def get_google_oauth() -> GoogleOAuthClient:
    return GoogleOAuthClient()


@lru_cache
def get_email_sender() -> EmailSenderPort:
    oauth = get_google_oauth()
    if settings.GOOGLE_REFRESH_TOKEN and oauth.configured:
        logger.info("Using Gmail sender")
        return GmailSender(oauth=oauth, refresh_token=settings.GOOGLE_REFRESH_TOKEN, sender=settings.EMAIL_SENDER)
    if _is_local():
        logger.info("Using MockEmailSender (Google credentials missing, ENV=dev/local)")
        return MockEmailSender()
    raise ValueError("GOOGLE_CLIENT_ID, GOOGLE_CLIENT_SECRET and GOOGLE_REFRESH_TOKEN are required to send email.")


@lru_cache
def get_dropbox_client() -> DropboxClient:
    return DropboxClient()


def get_folder_provisioner() -> FolderProvisionerPort:
    if settings.DROPBOX_ACCESS_TOKEN or settings.DROPBOX_REFRESH_TOKEN:
        return get_dropbox_client()
    if _is_local():
        logger.info("Using MockFolderProvisioner (Dropbox token missing, ENV=dev/local)")
        return MockFolderProvisioner(projects_root=settings.DROPBOX_PROJECTS_ROOT)
    raise ValueError("DROPBOX_ACCESS_TOKEN or DROPBOX_REFRESH_TOKEN is required to create project folders.")


def get_send_email_use_case() -> SendEmailUseCase:
    return SendEmailUseCase(sender=get_email_sender(), repository=get_booking_repository())


def get_project_folders_use_case() -> ProjectFoldersUseCase:
    return ProjectFoldersUseCase(provisioner=get_folder_provisioner(), repository=get_booking_repository())


def _announce_new_bookings(count: int) -> None:
    logger.info(f"{count} New Booking{'s' if count > 1 else ''}", extra={"count": count})


def get_synchronizer() -> PollingSynchronizer:
    global _synchronizer
    if _synchronizer is None:
        _synchronizer = PollingSynchronizer(
            repository=get_booking_repository(),
            interval_seconds=settings.POLLING_INTERVAL_SECONDS,
            on_new_bookings=_announce_new_bookings,
        )
    return _synchronizer


def new_table_editor(synchronizer: PollingSynchronizer | None = None) -> TableAggregateEditor:
    """Table editor fed by the synchronizer; saves and deletes trigger a manual refresh."""
    sync = synchronizer or get_synchronizer()
    editor: TableAggregateEditor

    def refresh() -> None:
        sync.refresh()
        editor.load(sync.bookings)

    editor = TableAggregateEditor(repository=get_booking_repository(), refresh=refresh)
    editor.load(sync.bookings)
    return editor


def new_edit_session(booking: Booking) -> BookingEditSession:
    try:
        project_folders = get_project_folders_use_case()
    except ValueError as e:
        logger.warning("Project folders not available", extra={"error": str(e)})
        project_folders = None
    try:
        send_email = get_send_email_use_case()
    except ValueError as e:
        logger.warning("Email sending not available", extra={"error": str(e)})
        send_email = None

    return BookingEditSession(
        booking=booking,
        repository=get_booking_repository(),
        catalog=get_service_catalog(),
        project_folders=project_folders,
        send_email=send_email,
    )
