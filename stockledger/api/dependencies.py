"""
Dependency injection container for FastAPI.

Provides use case instances and the acting user to route handlers.
Tests swap any of these through app.dependency_overrides.
"""

from typing import Annotated

from fastapi import Header, HTTPException, status

from stockledger.application.use_cases import (
    AdjustStockUseCase,
    ArchiveProductUseCase,
    CancelPurchaseUseCase,
    CreatePurchaseDraftUseCase,
    CreateSaleUseCase,
    DeletePurchaseDraftUseCase,
    DeleteSaleUseCase,
    LedgerQueries,
    PostPurchaseUseCase,
    RegisterProductUseCase,
    RestoreProductUseCase,
    UpdatePurchaseDraftUseCase,
    UpdateSaleUseCase,
)
from stockledger.config import get_settings
from stockledger.core.entities.actor import Actor, ActorRole


# Actor
async def get_current_actor(
    x_actor_id: Annotated[str | None, Header()] = None,
    x_actor_role: Annotated[str | None, Header()] = None,
    x_actor_name: Annotated[str | None, Header()] = None,
) -> Actor:
    """
    Build the acting user from headers set by the authenticating gateway.

    X-Actor-Id is required; X-Actor-Role defaults to staff.
    """
    if not x_actor_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-Actor-Id header",
        )
    try:
        actor_id = int(x_actor_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-Actor-Id must be an integer",
        ) from None

    role = ActorRole.STAFF
    if x_actor_role:
        try:
            role = ActorRole(x_actor_role.strip().lower())
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Unknown actor role: {x_actor_role}",
            ) from None

    return Actor(id=actor_id, role=role, name=x_actor_name)


# Purchase use cases
def get_create_purchase_use_case() -> CreatePurchaseDraftUseCase:
    return CreatePurchaseDraftUseCase()


def get_update_purchase_use_case() -> UpdatePurchaseDraftUseCase:
    return UpdatePurchaseDraftUseCase()


def get_delete_purchase_use_case() -> DeletePurchaseDraftUseCase:
    return DeletePurchaseDraftUseCase()


def get_post_purchase_use_case() -> PostPurchaseUseCase:
    return PostPurchaseUseCase()


def get_cancel_purchase_use_case() -> CancelPurchaseUseCase:
    return CancelPurchaseUseCase(settings=get_settings())


# Sale use cases
def get_create_sale_use_case() -> CreateSaleUseCase:
    return CreateSaleUseCase(settings=get_settings())


def get_update_sale_use_case() -> UpdateSaleUseCase:
    return UpdateSaleUseCase()


def get_delete_sale_use_case() -> DeleteSaleUseCase:
    return DeleteSaleUseCase()


# Product use cases
def get_register_product_use_case() -> RegisterProductUseCase:
    return RegisterProductUseCase()


def get_adjust_stock_use_case() -> AdjustStockUseCase:
    return AdjustStockUseCase()


def get_archive_product_use_case() -> ArchiveProductUseCase:
    return ArchiveProductUseCase()


def get_restore_product_use_case() -> RestoreProductUseCase:
    return RestoreProductUseCase()


# Reads
def get_ledger_queries() -> LedgerQueries:
    return LedgerQueries(settings=get_settings())
