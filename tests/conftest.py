"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from pantry_score.config import Settings
from pantry_score.containers import AppContainer
from pantry_score.domain.products import Product, ProductStatus, UserInventory
from pantry_score.errors import PersistenceError
from pantry_score.services.ledger import InventoryRepository, ScoreLedger
from pantry_score.services.products import ProductRepository, ProductService
from pantry_score.services.reconciler import ReconcilerService

NOW = datetime(2026, 3, 10, 9, 30, tzinfo=UTC)
TODAY = NOW.date()


@dataclass
class FixedClock:
    """Clock returning a settable instant."""

    now: datetime = NOW

    def __call__(self) -> datetime:
        return self.now

    def advance(self, days: int) -> None:
        self.now = self.now + timedelta(days=days)


@dataclass
class InMemoryInventoryRepository(InventoryRepository):
    """In-memory inventory repository for tests."""

    inventories: dict[UUID, UserInventory] = field(default_factory=dict)
    failing_scores: set[UUID] = field(default_factory=set)

    def add_user(self, score: int = 0) -> UUID:
        user_id = uuid4()
        self.inventories[user_id] = UserInventory(
            id=uuid4(), user_id=user_id, score=score
        )
        return user_id

    def score(self, user_id: UUID) -> int:
        return self.inventories[user_id].score

    def get_by_user(self, user_id: UUID) -> UserInventory | None:
        return self.inventories.get(user_id)

    def increment_score(self, user_id: UUID, delta: int) -> int | None:
        inventory = self.inventories.get(user_id)
        if inventory is None:
            return None
        self.inventories[user_id] = replace(inventory, score=inventory.score + delta)
        return inventory.score + delta

    def set_score(self, user_id: UUID, score: int) -> bool:
        if user_id in self.failing_scores:
            raise PersistenceError("score update failed")
        inventory = self.inventories.get(user_id)
        if inventory is None:
            return False
        self.inventories[user_id] = replace(inventory, score=score)
        return True


@dataclass
class InMemoryProductRepository(ProductRepository):
    """In-memory product repository for tests."""

    products: dict[UUID, Product] = field(default_factory=dict)
    failing_updates: set[UUID] = field(default_factory=set)

    def create_product(  # noqa: PLR0913
        self,
        user_id: UUID,
        product_name: str,
        quantity: float,
        date_logged: datetime,
        date_of_expiry: date,
        status: ProductStatus,
        inventory_id: UUID | None,
    ) -> Product:
        product = Product(
            id=uuid4(),
            user_id=user_id,
            product_name=product_name,
            quantity=quantity,
            date_logged=date_logged,
            date_of_expiry=date_of_expiry,
            status=status,
            inventory_id=inventory_id,
        )
        self.products[product.id] = product
        return product

    def get_owned_product(self, user_id: UUID, product_id: UUID) -> Product | None:
        product = self.products.get(product_id)
        if product is None or product.user_id != user_id:
            return None
        return product

    def list_by_user(self, user_id: UUID) -> list[Product]:
        return [p for p in self.products.values() if p.user_id == user_id]

    def list_by_statuses(self, statuses: list[ProductStatus]) -> list[Product]:
        return [p for p in self.products.values() if p.status in statuses]

    def update_status(
        self,
        product_id: UUID,
        status: ProductStatus,
        consumption_credit: int | None = None,
    ) -> Product:
        if product_id in self.failing_updates:
            raise PersistenceError("update failed")
        current = self.products[product_id]
        updated = replace(
            current,
            status=status,
            consumption_credit=(
                current.consumption_credit
                if consumption_credit is None
                else consumption_credit
            ),
        )
        self.products[product_id] = updated
        return updated

    def delete_product(self, product_id: UUID) -> bool:
        return self.products.pop(product_id, None) is not None

    def delete_by_statuses(self, statuses: list[ProductStatus]) -> int:
        doomed = [pid for pid, p in self.products.items() if p.status in statuses]
        for product_id in doomed:
            del self.products[product_id]
        return len(doomed)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="test-header.test-payload.test-signature",
        admin_token="admin-token",
    )


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def inventory_repository() -> InMemoryInventoryRepository:
    return InMemoryInventoryRepository()


@pytest.fixture
def product_repository() -> InMemoryProductRepository:
    return InMemoryProductRepository()


@pytest.fixture
def ledger(inventory_repository: InMemoryInventoryRepository) -> ScoreLedger:
    return ScoreLedger(inventory_repository)


@pytest.fixture
def product_service(
    product_repository: InMemoryProductRepository,
    inventory_repository: InMemoryInventoryRepository,
    ledger: ScoreLedger,
    clock: FixedClock,
) -> ProductService:
    return ProductService(
        repository=product_repository,
        inventory_repository=inventory_repository,
        ledger=ledger,
        clock=clock,
    )


@pytest.fixture
def reconciler(
    product_repository: InMemoryProductRepository,
    ledger: ScoreLedger,
    clock: FixedClock,
) -> ReconcilerService:
    return ReconcilerService(repository=product_repository, ledger=ledger, clock=clock)


@pytest.fixture
def container(
    settings: Settings,
    ledger: ScoreLedger,
    product_service: ProductService,
    reconciler: ReconcilerService,
) -> AppContainer:
    return AppContainer(
        settings=settings,
        score_ledger=ledger,
        product_service=product_service,
        reconciler_service=reconciler,
    )


def expiring_in(days: int) -> str:
    """Return an ISO expiry date relative to the fixed test clock."""
    return (TODAY + timedelta(days=days)).isoformat()
