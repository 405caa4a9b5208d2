"""Product lifecycle service: create, status changes and deletion."""

import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Protocol
from uuid import UUID

from pantry_score.domain.products import Product, ProductStatus
from pantry_score.errors import (
    InvalidDateError,
    InvalidQuantityError,
    InvalidStatusError,
    InvalidTransitionError,
    InventoryNotFound,
    MissingFieldError,
    NotFoundOrForbidden,
)
from pantry_score.services.ledger import InventoryRepository, ScoreLedger
from pantry_score.services.scoring import (
    Clock,
    consumed_contribution,
    consumption_bonus,
    days_remaining,
    product_score,
    to_utc_date,
    utc_now,
)

_logger = logging.getLogger(__name__)

_FIELD_ALIASES = {
    "product_name": ("product_name", "productName"),
    "quantity": ("quantity",),
    "date_of_expiry": ("date_of_expiry", "dateOfExpiry"),
}

_ALLOWED_TRANSITIONS = {
    ProductStatus.NOT_EXPIRED: {
        ProductStatus.NOT_EXPIRED,
        ProductStatus.EXPIRED,
        ProductStatus.CONSUMED,
    },
    ProductStatus.EXPIRED: {ProductStatus.EXPIRED, ProductStatus.CONSUMED},
    ProductStatus.CONSUMED: {ProductStatus.CONSUMED},
}


class ProductRepository(Protocol):
    """Persistence interface for products."""

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
        """Create a product row and return it."""

    def get_owned_product(self, user_id: UUID, product_id: UUID) -> Product | None:
        """Return the product if it exists and belongs to the user."""

    def list_by_user(self, user_id: UUID) -> list[Product]:
        """Return all products owned by a user."""

    def list_by_statuses(self, statuses: list[ProductStatus]) -> list[Product]:
        """Return products across all users whose status is in statuses."""

    def update_status(
        self,
        product_id: UUID,
        status: ProductStatus,
        consumption_credit: int | None = None,
    ) -> Product:
        """Persist a new status and return the updated product.

        A non-None consumption_credit is stored alongside the status.
        """

    def delete_product(self, product_id: UUID) -> bool:
        """Delete a product; return False when nothing was removed."""

    def delete_by_statuses(self, statuses: list[ProductStatus]) -> int:
        """Delete all products whose status is in statuses; return the count."""


@dataclass
class ProductService:
    """Orchestrates product lifecycle events against the score ledger."""

    repository: ProductRepository
    inventory_repository: InventoryRepository
    ledger: ScoreLedger
    clock: Clock = field(default=utc_now)

    def list_products(self, user_id: UUID) -> list[Product]:
        """Return the user's products ordered by expiry date."""
        products = self.repository.list_by_user(user_id)
        return sorted(products, key=lambda product: product.date_of_expiry)

    def create(self, user_id: UUID, payload: dict[str, object]) -> Product:
        """Validate and persist a product, crediting its initial score."""
        inventory = self.inventory_repository.get_by_user(user_id)
        if inventory is None:
            raise InventoryNotFound(user_id)

        values = _required_fields(payload)
        expiry = _parse_date(values["date_of_expiry"])
        quantity = _parse_quantity(values["quantity"])
        raw_status = payload.get("status")
        status = (
            _parse_status(raw_status) if raw_status else ProductStatus.NOT_EXPIRED
        )

        now = self.clock()
        product = self.repository.create_product(
            user_id=user_id,
            product_name=str(values["product_name"]).strip(),
            quantity=quantity,
            date_logged=now,
            date_of_expiry=expiry,
            status=status,
            inventory_id=inventory.id,
        )
        initial_score = product_score(days_remaining(expiry, now), status)
        self.ledger.apply_delta(user_id, initial_score)
        _logger.info(
            "Created product %s for user %s (score %+d)",
            product.id,
            user_id,
            initial_score,
        )
        return product

    def update_status(
        self, user_id: UUID, product_id: UUID, new_status: object
    ) -> Product:
        """Change a product's status, awarding the consumption bonus once.

        Consumed products stay consumed and nothing returns to not_expired,
        so the bonus cannot be earned twice for the same product.
        """
        status = _parse_status(new_status)
        product = self.repository.get_owned_product(user_id, product_id)
        if product is None:
            raise NotFoundOrForbidden(product_id)

        old_status = product.status
        if status not in _ALLOWED_TRANSITIONS[old_status]:
            raise InvalidTransitionError(old_status, status)
        if status == old_status:
            return product

        if status != ProductStatus.CONSUMED:
            return self.repository.update_status(product_id, status)

        days = days_remaining(product.date_of_expiry, self.clock())
        updated = self.repository.update_status(
            product_id, status, consumption_credit=consumed_contribution(days)
        )
        self.ledger.apply_delta(user_id, consumption_bonus(days))
        return updated

    def delete(self, user_id: UUID, product_id: UUID) -> bool:
        """Delete a product, reversing whatever score it still contributes."""
        product = self.repository.get_owned_product(user_id, product_id)
        if product is None:
            raise NotFoundOrForbidden(product_id)

        days = days_remaining(product.date_of_expiry, self.clock())
        if product.status == ProductStatus.EXPIRED:
            # The expiry penalty survives deletion.
            points_to_subtract = 0
        elif product.status == ProductStatus.CONSUMED:
            points_to_subtract = consumed_contribution(days)
        else:
            points_to_subtract = product_score(days, product.status)
        self.ledger.apply_delta(user_id, -points_to_subtract)
        return self.repository.delete_product(product_id)


def _required_fields(payload: dict[str, object]) -> dict[str, object]:
    values: dict[str, object] = {}
    missing: list[str] = []
    for name, aliases in _FIELD_ALIASES.items():
        value = next(
            (payload[key] for key in aliases if payload.get(key) is not None), None
        )
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(name)
            continue
        values[name] = value
    if missing:
        raise MissingFieldError(missing)
    return values


def _parse_date(value: object) -> date:
    if isinstance(value, date):
        return to_utc_date(value)
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return to_utc_date(datetime.fromisoformat(text))
        except ValueError as exc:
            raise InvalidDateError(value) from exc
    raise InvalidDateError(value)


def _parse_quantity(value: object) -> float:
    if isinstance(value, bool):
        raise InvalidQuantityError(value)
    if isinstance(value, int | float):
        quantity = float(value)
    elif isinstance(value, str):
        try:
            quantity = float(value.strip())
        except ValueError as exc:
            raise InvalidQuantityError(value) from exc
    else:
        raise InvalidQuantityError(value)
    if not math.isfinite(quantity) or quantity <= 0:
        raise InvalidQuantityError(value)
    return quantity


def _parse_status(value: object) -> ProductStatus:
    if isinstance(value, ProductStatus):
        return value
    try:
        return ProductStatus(str(value))
    except ValueError as exc:
        raise InvalidStatusError(value) from exc
