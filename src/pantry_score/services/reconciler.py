"""Scheduled expiry checks and score reconciliation."""

import logging
import threading
from collections import defaultdict
from dataclasses import dataclass, field
from uuid import UUID

from pantry_score.domain.jobs import CleanupResult, JobFailure, ReconcileResult
from pantry_score.domain.products import Product, ProductStatus
from pantry_score.errors import PersistenceError
from pantry_score.services.ledger import ScoreLedger
from pantry_score.services.products import ProductRepository
from pantry_score.services.scoring import (
    Clock,
    days_remaining,
    product_score,
    utc_now,
)

_logger = logging.getLogger(__name__)

_ACTIVE_STATUSES = [ProductStatus.NOT_EXPIRED, ProductStatus.EXPIRED]
_FINISHED_STATUSES = [ProductStatus.EXPIRED, ProductStatus.CONSUMED]


@dataclass
class ReconcilerService:
    """Recomputes expiry status and user scores from stored products.

    With ``count_consumed_credit`` disabled the recomputed total only covers
    products that are not consumed, so bonuses earned through consumption are
    reset by each run. Enabling it credits each consumed product with the
    day points and bonus recorded when it was consumed, so the total stays
    stable however many runs follow.
    """

    repository: ProductRepository
    ledger: ScoreLedger
    count_consumed_credit: bool = False
    clock: Clock = field(default=utc_now)

    def reconcile_expiry_and_scores(
        self, cancel_event: threading.Event | None = None
    ) -> ReconcileResult:
        """Mark newly expired products and overwrite each user's score."""
        _logger.info("Starting expiry checks and score updates")
        result = ReconcileResult()
        statuses = list(_ACTIVE_STATUSES)
        if self.count_consumed_credit:
            statuses.append(ProductStatus.CONSUMED)
        products = self.repository.list_by_statuses(statuses)
        now = self.clock()

        user_scores: dict[UUID, int] = defaultdict(int)
        for product in products:
            if cancel_event is not None and cancel_event.is_set():
                return _cancelled(result)
            result.products_checked += 1
            days = days_remaining(product.date_of_expiry, now)
            try:
                status = self._expire_if_due(product, days)
            except PersistenceError as exc:
                _logger.exception("Failed to expire product %s", product.id)
                result.failures.append(JobFailure("product", product.id, str(exc)))
                continue
            if status != product.status:
                result.expired_transitions += 1
            user_scores[product.user_id] += self._contribution(product, days, status)

        if cancel_event is not None and cancel_event.is_set():
            return _cancelled(result)

        for user_id, score in user_scores.items():
            try:
                updated = self.ledger.overwrite(user_id, score)
            except PersistenceError as exc:
                _logger.exception("Failed to reset score for user %s", user_id)
                result.failures.append(JobFailure("inventory", user_id, str(exc)))
                continue
            if updated:
                result.users_updated += 1
                result.user_scores[user_id] = score

        _logger.info(
            "Updated expiry status and scores for %s products "
            "(%s expired, %s users, %s failures)",
            result.products_checked,
            result.expired_transitions,
            result.users_updated,
            len(result.failures),
        )
        return result

    def monthly_cleanup(
        self, cancel_event: threading.Event | None = None
    ) -> CleanupResult:
        """Purge expired and consumed products, then reconcile scores."""
        _logger.info("Starting monthly cleanup")
        deleted = self.repository.delete_by_statuses(list(_FINISHED_STATUSES))
        _logger.info("Deleted %s expired/consumed products", deleted)
        reconcile = self.reconcile_expiry_and_scores(cancel_event)
        _logger.info("Monthly cleanup completed")
        return CleanupResult(deleted_count=deleted, reconcile=reconcile)

    def _expire_if_due(self, product: Product, days: int) -> ProductStatus:
        if days <= 0 and product.status == ProductStatus.NOT_EXPIRED:
            self.repository.update_status(product.id, ProductStatus.EXPIRED)
            return ProductStatus.EXPIRED
        return product.status

    @staticmethod
    def _contribution(product: Product, days: int, status: ProductStatus) -> int:
        if status == ProductStatus.CONSUMED:
            return product.consumption_credit or 0
        return product_score(days, status)


def _cancelled(result: ReconcileResult) -> ReconcileResult:
    _logger.warning(
        "Reconciliation cancelled after %s products; scores left unchanged",
        result.products_checked,
    )
    result.cancelled = True
    return result
