"""Product endpoints: registration, stock adjustment, archive/restore."""

from fastapi import APIRouter, Depends, status

from stockledger.api.dependencies import (
    get_adjust_stock_use_case,
    get_archive_product_use_case,
    get_current_actor,
    get_ledger_queries,
    get_register_product_use_case,
    get_restore_product_use_case,
)
from stockledger.application.dto.requests import AdjustStockRequest, RegisterProductRequest
from stockledger.application.dto.responses import (
    ErrorResponse,
    ProductListResponse,
    ProductMutationResponse,
    ProductResponse,
)
from stockledger.application.use_cases import (
    AdjustStockUseCase,
    ArchiveProductUseCase,
    LedgerQueries,
    RegisterProductUseCase,
    RestoreProductUseCase,
)
from stockledger.core.entities.actor import Actor

router = APIRouter(prefix="/api/products", tags=["products"])


@router.post(
    "",
    response_model=ProductMutationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def register_product(
    request: RegisterProductRequest,
    actor: Actor = Depends(get_current_actor),
    use_case: RegisterProductUseCase = Depends(get_register_product_use_case),
) -> ProductMutationResponse:
    """Register a product with its opening stock."""
    result = await use_case.execute(request, actor)
    return use_case.to_response(result)


@router.get("", response_model=ProductListResponse)
async def list_products(
    limit: int = 100,
    offset: int = 0,
    include_deleted: bool = False,
    actor: Actor = Depends(get_current_actor),
    queries: LedgerQueries = Depends(get_ledger_queries),
) -> ProductListResponse:
    """List products ordered by code."""
    return await queries.list_products(
        limit=limit, offset=offset, include_deleted=include_deleted
    )


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_product(
    product_id: int,
    actor: Actor = Depends(get_current_actor),
    queries: LedgerQueries = Depends(get_ledger_queries),
) -> ProductResponse:
    """Get current stock and cost basis of a product."""
    return await queries.get_product(product_id)


@router.post(
    "/{product_id}/adjust",
    response_model=ProductMutationResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def adjust_stock(
    product_id: int,
    request: AdjustStockRequest,
    actor: Actor = Depends(get_current_actor),
    use_case: AdjustStockUseCase = Depends(get_adjust_stock_use_case),
) -> ProductMutationResponse:
    """Correct stock to a counted quantity."""
    result = await use_case.execute(product_id, request, actor)
    return use_case.to_response(result)


@router.delete(
    "/{product_id}",
    response_model=ProductMutationResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def archive_product(
    product_id: int,
    actor: Actor = Depends(get_current_actor),
    use_case: ArchiveProductUseCase = Depends(get_archive_product_use_case),
) -> ProductMutationResponse:
    """Soft-delete a product."""
    result = await use_case.execute(product_id, actor)
    return use_case.to_response(result)


@router.post(
    "/{product_id}/restore",
    response_model=ProductMutationResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def restore_product(
    product_id: int,
    actor: Actor = Depends(get_current_actor),
    use_case: RestoreProductUseCase = Depends(get_restore_product_use_case),
) -> ProductMutationResponse:
    """Restore a soft-deleted product (admin only)."""
    result = await use_case.execute(product_id, actor)
    return use_case.to_response(result)
