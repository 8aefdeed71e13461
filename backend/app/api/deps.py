from typing import AsyncGenerator
from fastapi import Depends

from app.services.form_service import FormService
from app.services.persistence.api_client import PersistenceAPI, build_http_client
from app.services.storage.supabase_storage import SupabaseStorage
from app.services.storage.transfer import BlobTransferService


async def get_persistence() -> AsyncGenerator[PersistenceAPI, None]:
    """
    Yields a persistence API client per request.
    Ensures the HTTP connection pool is closed even on exceptions.
    """
    client = build_http_client()
    try:
        yield PersistenceAPI(client)
    finally:
        await client.aclose()


def get_storage() -> BlobTransferService:
    """
    Provides the blob store.
    Using Depends(get_storage) allows for easy faking of Supabase in tests.
    """
    return SupabaseStorage()


def get_form_service(
    persistence: PersistenceAPI = Depends(get_persistence),
    storage: BlobTransferService = Depends(get_storage),
) -> FormService:
    """
    Service dependency for entity form flows.
    Injects both the persistence client and the storage provider.
    """
    return FormService(persistence=persistence, storage=storage)
