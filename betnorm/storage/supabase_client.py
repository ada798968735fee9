# betnorm/storage/supabase_client.py
from typing import Any, Optional

import httpx
from loguru import logger
from postgrest import APIResponse
from postgrest.exceptions import APIError
from supabase import Client, create_client
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from betnorm.config.settings import AppSettings, settings as default_settings

from .base_store import CollectionStore, StorageError

# Network hiccups are retried; API errors (bad table, auth) are not
_transient_retry = retry(
    stop=stop_after_attempt(4),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type(httpx.TransportError),
    reraise=True,
)


class SupabaseCollectionStore(CollectionStore):
    """Keeps each collection as one ``{key, payload}`` row in a Supabase table."""

    def __init__(self, client: Client, table: str = "normalization_collections"):
        self.client = client
        self.table = table

    @_transient_retry
    def _select(self, key: str) -> APIResponse:
        return (
            self.client.table(self.table)
            .select("payload")
            .eq("key", key)
            .limit(1)
            .execute()
        )

    @_transient_retry
    def _upsert(self, key: str, value: Any) -> APIResponse:
        return (
            self.client.table(self.table)
            .upsert({"key": key, "payload": value}, on_conflict="key")
            .execute()
        )

    def get(self, key: str) -> Optional[Any]:
        try:
            response = self._select(key)
        except APIError as e:
            logger.error(f"Error reading '{key}' from {self.table}: {e.message}")
            logger.debug(f"Full APIError details: {e}")
            raise StorageError(f"Supabase read failed for '{key}'") from e
        except httpx.TransportError as e:
            raise StorageError(f"Supabase unreachable while reading '{key}'") from e

        if not response.data:
            return None
        return response.data[0].get("payload")

    def set(self, key: str, value: Any) -> None:
        try:
            self._upsert(key, value)
        except APIError as e:
            logger.error(f"Error during upsert of '{key}' to {self.table}: {e.message}")
            logger.debug(f"Full APIError details: {e}")
            raise StorageError(f"Supabase write failed for '{key}'") from e
        except httpx.TransportError as e:
            raise StorageError(f"Supabase unreachable while writing '{key}'") from e
        logger.success(f"Upserted collection '{key}' to {self.table}.")


def create_supabase_store(app_settings: Optional[AppSettings] = None) -> SupabaseCollectionStore:
    """Builds a store from settings. Raises StorageError when credentials are missing."""
    app_settings = app_settings or default_settings
    if not app_settings.supabase_url or not app_settings.supabase_key:
        raise StorageError("Supabase URL or Key not configured in settings.")

    logger.debug(f"Initializing Supabase client with URL: {app_settings.supabase_url}")
    try:
        client = create_client(app_settings.supabase_url, app_settings.supabase_key)
    except Exception as e:
        logger.exception(f"Failed to initialize Supabase client: {e}")
        raise StorageError("Failed to initialize Supabase client") from e
    return SupabaseCollectionStore(client, app_settings.supabase_table)
