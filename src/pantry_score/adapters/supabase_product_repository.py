"""Supabase repository for products."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from postgrest.exceptions import APIError
from supabase import Client

from pantry_score.domain.products import Product, ProductStatus
from pantry_score.errors import PersistenceError
from pantry_score.services.products import ProductRepository

_COLUMNS = (
    "id, user_id, product_name, quantity, date_logged, date_of_expiry, status, "
    "inventory_id, consumption_credit"
)


@dataclass
class SupabaseProductRepository(ProductRepository):
    """Supabase implementation for product persistence."""

    client: Client

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
        """Insert a product row and return it."""
        data = _execute(
            self.client.table("products").insert(
                {
                    "user_id": str(user_id),
                    "product_name": product_name,
                    "quantity": _format_quantity(quantity),
                    "date_logged": date_logged.isoformat(),
                    "date_of_expiry": date_of_expiry.isoformat(),
                    "status": status.value,
                    "inventory_id": str(inventory_id) if inventory_id else None,
                }
            )
        )
        if not data:
            raise PersistenceError("Failed to create product")
        return _parse_product(data[0])

    def get_owned_product(self, user_id: UUID, product_id: UUID) -> Product | None:
        """Return a product by id, scoped to its owner."""
        data = _execute(
            self.client.table("products")
            .select(_COLUMNS)
            .eq("id", str(product_id))
            .eq("user_id", str(user_id))
            .limit(1)
        )
        if not data:
            return None
        return _parse_product(data[0])

    def list_by_user(self, user_id: UUID) -> list[Product]:
        """Return all products for a user."""
        data = _execute(
            self.client.table("products")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .order("date_of_expiry", desc=False)
        )
        return [_parse_product(row) for row in data]

    def list_by_statuses(self, statuses: list[ProductStatus]) -> list[Product]:
        """Return products in any of the given statuses."""
        data = _execute(
            self.client.table("products")
            .select(_COLUMNS)
            .in_("status", [status.value for status in statuses])
        )
        return [_parse_product(row) for row in data]

    def update_status(
        self,
        product_id: UUID,
        status: ProductStatus,
        consumption_credit: int | None = None,
    ) -> Product:
        """Persist a product status and return the updated row."""
        payload: dict[str, object] = {"status": status.value}
        if consumption_credit is not None:
            payload["consumption_credit"] = consumption_credit
        data = _execute(
            self.client.table("products")
            .update(payload)
            .eq("id", str(product_id))
        )
        if not data:
            raise PersistenceError(f"Failed to update product {product_id}")
        return _parse_product(data[0])

    def delete_product(self, product_id: UUID) -> bool:
        """Delete a product row."""
        data = _execute(
            self.client.table("products").delete().eq("id", str(product_id))
        )
        return bool(data)

    def delete_by_statuses(self, statuses: list[ProductStatus]) -> int:
        """Delete products in any of the given statuses."""
        data = _execute(
            self.client.table("products")
            .delete()
            .in_("status", [status.value for status in statuses])
        )
        return len(data)


def _execute(query) -> list[dict[str, object]]:  # type: ignore[no-untyped-def]
    try:
        response = query.execute()
    except APIError as exc:
        raise PersistenceError(str(exc)) from exc
    return response.data or []


def _format_quantity(quantity: float) -> str:
    if quantity.is_integer():
        return str(int(quantity))
    return str(quantity)


def _parse_product(row: dict[str, object]) -> Product:
    inventory_id = row.get("inventory_id")
    credit = row.get("consumption_credit")
    return Product(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        product_name=str(row.get("product_name", "")),
        quantity=float(row.get("quantity") or 0.0),
        date_logged=datetime.fromisoformat(str(row["date_logged"])),
        date_of_expiry=_parse_expiry(row["date_of_expiry"]),
        status=ProductStatus(str(row.get("status") or ProductStatus.NOT_EXPIRED)),
        inventory_id=UUID(str(inventory_id)) if inventory_id else None,
        consumption_credit=int(credit) if credit is not None else None,
    )


def _parse_expiry(value: object) -> date:
    text = str(value)
    if "T" in text:
        return datetime.fromisoformat(text).date()
    return date.fromisoformat(text)
