"""Result models for scheduled jobs."""

from dataclasses import dataclass, field
from uuid import UUID


@dataclass(frozen=True)
class JobFailure:
    """A single item a job could not process."""

    entity_type: str
    entity_id: UUID
    error: str


@dataclass
class ReconcileResult:
    """Outcome of an expiry and score reconciliation run."""

    products_checked: int = 0
    expired_transitions: int = 0
    users_updated: int = 0
    user_scores: dict[UUID, int] = field(default_factory=dict)
    failures: list[JobFailure] = field(default_factory=list)
    cancelled: bool = False

    def to_dict(self) -> dict[str, object]:
        """Serialize the result for JSON responses."""
        return {
            "products_checked": self.products_checked,
            "expired_transitions": self.expired_transitions,
            "users_updated": self.users_updated,
            "user_scores": {
                str(user_id): score for user_id, score in self.user_scores.items()
            },
            "failures": [_serialize_failure(failure) for failure in self.failures],
            "cancelled": self.cancelled,
        }


@dataclass
class CleanupResult:
    """Outcome of the monthly purge of finished products."""

    deleted_count: int
    reconcile: ReconcileResult

    def to_dict(self) -> dict[str, object]:
        """Serialize the result for JSON responses."""
        return {
            "deleted_count": self.deleted_count,
            "reconcile": self.reconcile.to_dict(),
        }


def _serialize_failure(failure: JobFailure) -> dict[str, str]:
    return {
        "entity_type": failure.entity_type,
        "entity_id": str(failure.entity_id),
        "error": failure.error,
    }
