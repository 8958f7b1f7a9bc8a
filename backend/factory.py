"""Composition root for backend services."""

from __future__ import annotations

import logging

from backend.db.supabase_client import SupabaseClient, SupabaseSettings
from backend.repositories.members_repository import InMemoryMembersRepository, SupabaseMembersRepository
from backend.repositories.transactions_repository import (
    InMemoryTransactionsRepository,
    SupabaseTransactionsRepository,
)
from backend.services.ledger_service import LedgerService
from shared import config
from shared.ui_state import InMemoryThemePreferenceStore, JsonFileThemePreferenceStore, ThemePreferenceStore


logger = logging.getLogger(__name__)


def build_ledger_service() -> LedgerService:
    """Build the ledger service with Supabase adapters, or in-memory ones when unconfigured."""

    supabase_url = config.supabase_url()
    supabase_key = config.supabase_service_role_key()
    if supabase_url and supabase_key:
        supabase_client = SupabaseClient(
            settings=SupabaseSettings(
                url=supabase_url,
                service_role_key=supabase_key,
                anon_key=config.supabase_anon_key(),
            )
        )
        logger.info("ledger_backend=supabase url=%s", supabase_url)
        return LedgerService(
            transactions_repository=SupabaseTransactionsRepository(client=supabase_client),
            members_repository=SupabaseMembersRepository(client=supabase_client),
        )

    logger.warning("ledger_backend=in_memory; define SUPABASE_URL and SUPABASE_ANON_KEY to persist data")
    members_repository = InMemoryMembersRepository()
    return LedgerService(
        transactions_repository=InMemoryTransactionsRepository(members_repository=members_repository),
        members_repository=members_repository,
    )


def build_theme_preference_store() -> ThemePreferenceStore:
    path = config.theme_preference_path()
    if path:
        return JsonFileThemePreferenceStore(path)
    return InMemoryThemePreferenceStore()
