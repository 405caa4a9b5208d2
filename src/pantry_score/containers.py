"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from pantry_score.adapters.supabase_inventory_repository import (
    SupabaseInventoryRepository,
)
from pantry_score.adapters.supabase_product_repository import (
    SupabaseProductRepository,
)
from pantry_score.config import Settings
from pantry_score.services.ledger import ScoreLedger
from pantry_score.services.products import ProductService
from pantry_score.services.reconciler import ReconcilerService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    score_ledger: ScoreLedger
    product_service: ProductService
    reconciler_service: ReconcilerService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    product_repository = SupabaseProductRepository(supabase_client)
    inventory_repository = SupabaseInventoryRepository(supabase_client)
    score_ledger = ScoreLedger(inventory_repository)
    product_service = ProductService(
        repository=product_repository,
        inventory_repository=inventory_repository,
        ledger=score_ledger,
    )
    reconciler_service = ReconcilerService(
        repository=product_repository,
        ledger=score_ledger,
        count_consumed_credit=resolved_settings.reconcile_consumed_credit,
    )
    return AppContainer(
        settings=resolved_settings,
        score_ledger=score_ledger,
        product_service=product_service,
        reconciler_service=reconciler_service,
    )
