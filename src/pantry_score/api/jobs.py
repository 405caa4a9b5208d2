"""Scheduled job trigger endpoints with simple token auth."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

if TYPE_CHECKING:
    from pantry_score.containers import AppContainer

router = APIRouter(prefix="/jobs", tags=["jobs"])
_logger = logging.getLogger(__name__)


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.post("/reconcile", dependencies=[Depends(require_admin)])
def reconcile(request: Request) -> dict[str, object]:
    """Run the expiry check and score reconciliation."""
    container: AppContainer = request.app.state.container
    _logger.info("Running scheduled expiry and score updates")
    result = container.reconciler_service.reconcile_expiry_and_scores()
    return result.to_dict()


@router.post("/monthly-cleanup", dependencies=[Depends(require_admin)])
def monthly_cleanup(request: Request) -> dict[str, object]:
    """Purge finished products and reconcile scores."""
    container: AppContainer = request.app.state.container
    _logger.info("Running monthly product cleanup")
    result = container.reconciler_service.monthly_cleanup()
    return result.to_dict()
