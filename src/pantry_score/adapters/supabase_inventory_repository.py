"""Supabase repository for user inventories."""

from dataclasses import dataclass
from uuid import UUID

from postgrest.exceptions import APIError
from supabase import Client

from pantry_score.domain.products import UserInventory
from pantry_score.errors import PersistenceError
from pantry_score.services.ledger import InventoryRepository


@dataclass
class SupabaseInventoryRepository(InventoryRepository):
    """Supabase implementation for inventory scores."""

    client: Client

    def get_by_user(self, user_id: UUID) -> UserInventory | None:
        """Return the inventory row for a user."""
        try:
            response = (
                self.client.table("user_inventories")
                .select("id, user_id, score")
                .eq("user_id", str(user_id))
                .limit(1)
                .execute()
            )
        except APIError as exc:
            raise PersistenceError(str(exc)) from exc
        if not response.data:
            return None
        row = response.data[0]
        return UserInventory(
            id=UUID(str(row["id"])),
            user_id=UUID(str(row["user_id"])),
            score=int(row.get("score") or 0),
        )

    def increment_score(self, user_id: UUID, delta: int) -> int | None:
        """Apply a delta with a single UPDATE ... SET score = score + delta."""
        try:
            response = self.client.rpc(
                "increment_inventory_score",
                {"p_user_id": str(user_id), "p_delta": delta},
            ).execute()
        except APIError as exc:
            raise PersistenceError(str(exc)) from exc
        data = response.data
        if isinstance(data, list):
            data = data[0] if data else None
        if isinstance(data, dict):
            data = next(iter(data.values()), None)
        if data is None:
            return None
        return int(data)

    def set_score(self, user_id: UUID, score: int) -> bool:
        """Overwrite a user's score."""
        try:
            response = (
                self.client.table("user_inventories")
                .update({"score": score})
                .eq("user_id", str(user_id))
                .execute()
            )
        except APIError as exc:
            raise PersistenceError(str(exc)) from exc
        return bool(response.data)
