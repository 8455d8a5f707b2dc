"""Purchase lifecycle endpoints: draft, post, cancel."""

from datetime import datetime

from fastapi import APIRouter, Body, Depends, Query, status

from stockledger.api.dependencies import (
    get_cancel_purchase_use_case,
    get_create_purchase_use_case,
    get_current_actor,
    get_delete_purchase_use_case,
    get_ledger_queries,
    get_post_purchase_use_case,
    get_update_purchase_use_case,
)
from stockledger.application.dto.requests import (
    CancelPurchaseRequest,
    CreatePurchaseRequest,
    UpdatePurchaseRequest,
)
from stockledger.application.dto.responses import (
    DeleteResponse,
    ErrorResponse,
    PurchaseListResponse,
    PurchaseResponse,
    PurchaseTransitionResponse,
)
from stockledger.application.use_cases import (
    CancelPurchaseUseCase,
    CreatePurchaseDraftUseCase,
    DeletePurchaseDraftUseCase,
    LedgerQueries,
    PostPurchaseUseCase,
    UpdatePurchaseDraftUseCase,
)
from stockledger.core.entities.actor import Actor
from stockledger.core.entities.purchase import PurchaseStatus

router = APIRouter(prefix="/api/purchases", tags=["purchases"])


@router.post(
    "",
    response_model=PurchaseResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def create_purchase(
    request: CreatePurchaseRequest,
    actor: Actor = Depends(get_current_actor),
    use_case: CreatePurchaseDraftUseCase = Depends(get_create_purchase_use_case),
) -> PurchaseResponse:
    """Create a purchase draft. Binds unbound products to the supplier."""
    result = await use_case.execute(request, actor)
    return use_case.to_response(result)


@router.get("", response_model=PurchaseListResponse)
async def list_purchases(
    supplier_id: int | None = None,
    status_filter: PurchaseStatus | None = Query(default=None, alias="status"),
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    limit: int = 20,
    offset: int = 0,
    actor: Actor = Depends(get_current_actor),
    queries: LedgerQueries = Depends(get_ledger_queries),
) -> PurchaseListResponse:
    """List purchases newest first."""
    return await queries.list_purchases(
        supplier_id=supplier_id,
        status=status_filter,
        date_from=date_from,
        date_to=date_to,
        limit=limit,
        offset=offset,
    )


@router.get(
    "/{purchase_id}",
    response_model=PurchaseResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_purchase(
    purchase_id: int,
    actor: Actor = Depends(get_current_actor),
    queries: LedgerQueries = Depends(get_ledger_queries),
) -> PurchaseResponse:
    """Get one purchase with its items."""
    return await queries.get_purchase(purchase_id)


@router.put(
    "/{purchase_id}",
    response_model=PurchaseResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def update_purchase(
    purchase_id: int,
    request: UpdatePurchaseRequest,
    actor: Actor = Depends(get_current_actor),
    use_case: UpdatePurchaseDraftUseCase = Depends(get_update_purchase_use_case),
) -> PurchaseResponse:
    """Replace a draft's header and items."""
    result = await use_case.execute(purchase_id, request, actor)
    return use_case.to_response(result)


@router.delete(
    "/{purchase_id}",
    response_model=DeleteResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_purchase(
    purchase_id: int,
    actor: Actor = Depends(get_current_actor),
    use_case: DeletePurchaseDraftUseCase = Depends(get_delete_purchase_use_case),
) -> DeleteResponse:
    """Delete a draft purchase."""
    deleted_id = await use_case.execute(purchase_id, actor)
    return use_case.to_response(deleted_id)


@router.post(
    "/{purchase_id}/post",
    response_model=PurchaseTransitionResponse,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def post_purchase(
    purchase_id: int,
    actor: Actor = Depends(get_current_actor),
    use_case: PostPurchaseUseCase = Depends(get_post_purchase_use_case),
) -> PurchaseTransitionResponse:
    """Post a draft: receive stock, recompute average costs, log every item."""
    result = await use_case.execute(purchase_id, actor)
    return use_case.to_response(result)


@router.post(
    "/{purchase_id}/cancel",
    response_model=PurchaseTransitionResponse,
    responses={
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def cancel_purchase(
    purchase_id: int,
    request: CancelPurchaseRequest | None = Body(default=None),
    actor: Actor = Depends(get_current_actor),
    use_case: CancelPurchaseUseCase = Depends(get_cancel_purchase_use_case),
) -> PurchaseTransitionResponse:
    """Cancel a posted purchase (admin only), reversing its stock."""
    reason = request.reason if request else None
    result = await use_case.execute(purchase_id, actor, reason)
    return use_case.to_response(result)
