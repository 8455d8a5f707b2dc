"""Inventory log endpoints (read-only)."""

from datetime import datetime

from fastapi import APIRouter, Depends

from stockledger.api.dependencies import get_current_actor, get_ledger_queries
from stockledger.application.dto.responses import ErrorResponse, InventoryLogListResponse
from stockledger.application.use_cases import LedgerQueries
from stockledger.core.entities.actor import Actor
from stockledger.core.entities.inventory_log import InventoryAction, InventoryLogFilter

router = APIRouter(prefix="/api/inventory-logs", tags=["inventory-logs"])


@router.get(
    "",
    response_model=InventoryLogListResponse,
    responses={400: {"model": ErrorResponse}},
)
async def query_inventory_logs(
    product_id: int | None = None,
    action: InventoryAction | None = None,
    actor_id: int | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    limit: int = 50,
    offset: int = 0,
    actor: Actor = Depends(get_current_actor),
    queries: LedgerQueries = Depends(get_ledger_queries),
) -> InventoryLogListResponse:
    """
    Query the inventory log newest first.

    Filters combine with AND; `limit` is capped by LEDGER_MAX_LOG_PAGE_SIZE.
    """
    return await queries.query_inventory_log(
        InventoryLogFilter(
            product_id=product_id,
            action=action,
            actor_id=actor_id,
            date_from=date_from,
            date_to=date_to,
            limit=limit,
            offset=offset,
        )
    )
