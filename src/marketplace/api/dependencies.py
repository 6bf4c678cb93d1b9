"""Shared FastAPI dependencies."""

from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import Depends

from ..config import settings
from ..db.supabase import get_supabase_client
from ..persistence.filesystem import FileStorage
from ..persistence.memory import MemoryStore
from ..persistence.seed import load_seed_file
from ..persistence.store import MarketplaceStore
from ..persistence.supabase_store import SupabaseStore
from ..services.fees import DeliveryFeeCalculator
from ..services.geocoding import NominatimClient
from ..services.ledger import LedgerService
from ..services.withdrawals import WithdrawalWorkflow


@lru_cache()
def get_store() -> MarketplaceStore:
    """Supabase when credentials are configured, otherwise an in-memory store."""

    client = get_supabase_client()
    if client is not None:
        logging.info("Using Supabase store")
        return SupabaseStore(client)

    store = MemoryStore()
    if settings.seed_file:
        load_seed_file(settings.seed_file, store)
    logging.info("Using in-memory store")
    return store


def get_calculator(store: MarketplaceStore = Depends(get_store)) -> DeliveryFeeCalculator:
    return DeliveryFeeCalculator(store)


def get_ledger(store: MarketplaceStore = Depends(get_store)) -> LedgerService:
    return LedgerService(store)


def get_workflow(store: MarketplaceStore = Depends(get_store)) -> WithdrawalWorkflow:
    return WithdrawalWorkflow(store)


@lru_cache()
def get_geocoder() -> NominatimClient:
    return NominatimClient()


def get_file_storage() -> FileStorage:
    return FileStorage()
