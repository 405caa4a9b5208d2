"""Domain models for tracked products and user inventories."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum
from uuid import UUID


class ProductStatus(StrEnum):
    """Lifecycle status of a tracked product."""

    NOT_EXPIRED = "not_expired"
    EXPIRED = "expired"
    CONSUMED = "consumed"


@dataclass(frozen=True)
class Product:
    """A perishable item owned by a single user."""

    id: UUID
    user_id: UUID
    product_name: str
    quantity: float
    date_logged: datetime
    date_of_expiry: date
    status: ProductStatus
    inventory_id: UUID | None = None
    consumption_credit: int | None = None


@dataclass(frozen=True)
class UserInventory:
    """Per-user inventory record holding the running score."""

    id: UUID
    user_id: UUID
    score: int
