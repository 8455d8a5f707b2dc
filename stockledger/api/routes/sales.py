"""Sale endpoints."""

from fastapi import APIRouter, Depends, status

from stockledger.api.dependencies import (
    get_create_sale_use_case,
    get_current_actor,
    get_delete_sale_use_case,
    get_ledger_queries,
    get_update_sale_use_case,
)
from stockledger.application.dto.requests import CreateSaleRequest, UpdateSaleRequest
from stockledger.application.dto.responses import (
    DeleteSaleResponse,
    ErrorResponse,
    SaleListResponse,
    SaleMutationResponse,
    SaleResponse,
)
from stockledger.application.use_cases import (
    CreateSaleUseCase,
    DeleteSaleUseCase,
    LedgerQueries,
    UpdateSaleUseCase,
)
from stockledger.core.entities.actor import Actor

router = APIRouter(prefix="/api/sales", tags=["sales"])


@router.post(
    "",
    response_model=SaleMutationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def create_sale(
    request: CreateSaleRequest,
    actor: Actor = Depends(get_current_actor),
    use_case: CreateSaleUseCase = Depends(get_create_sale_use_case),
) -> SaleMutationResponse:
    """Create a sale and take its lines out of stock."""
    result = await use_case.execute(request, actor)
    return use_case.to_response(result)


@router.get("", response_model=SaleListResponse)
async def list_sales(
    limit: int = 50,
    offset: int = 0,
    actor: Actor = Depends(get_current_actor),
    queries: LedgerQueries = Depends(get_ledger_queries),
) -> SaleListResponse:
    """List sales newest first."""
    return await queries.list_sales(limit=limit, offset=offset)


@router.get(
    "/{sale_id}",
    response_model=SaleResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_sale(
    sale_id: int,
    actor: Actor = Depends(get_current_actor),
    queries: LedgerQueries = Depends(get_ledger_queries),
) -> SaleResponse:
    """Get one sale with its lines."""
    return await queries.get_sale(sale_id)


@router.put(
    "/{sale_id}",
    response_model=SaleMutationResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def update_sale(
    sale_id: int,
    request: UpdateSaleRequest,
    actor: Actor = Depends(get_current_actor),
    use_case: UpdateSaleUseCase = Depends(get_update_sale_use_case),
) -> SaleMutationResponse:
    """Replace a sale's lines: restore the originals, then apply the new ones."""
    result = await use_case.execute(sale_id, request, actor)
    return use_case.to_response(result)


@router.delete(
    "/{sale_id}",
    response_model=DeleteSaleResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_sale(
    sale_id: int,
    actor: Actor = Depends(get_current_actor),
    use_case: DeleteSaleUseCase = Depends(get_delete_sale_use_case),
) -> DeleteSaleResponse:
    """Delete a sale and put its stock back."""
    result = await use_case.execute(sale_id, actor)
    return use_case.to_response(result)
