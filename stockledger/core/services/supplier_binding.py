"""Supplier-binding invariant: a product is sourced from at most one supplier."""

from collections.abc import Iterable
from typing import Any

from stockledger.config import get_logger
from stockledger.core.entities.product import Product
from stockledger.core.exceptions import SupplierBindingError
from stockledger.core.interfaces.product_store import IProductStore

logger = get_logger(__name__)


def find_binding_conflicts(
    supplier_id: int, products: Iterable[Product]
) -> list[dict[str, Any]]:
    """Products already bound to a supplier other than supplier_id."""
    return [
        {
            "product_id": p.id,
            "product_name": p.display_name,
            "bound_supplier_id": p.supplier_id,
        }
        for p in products
        if p.supplier_id is not None and p.supplier_id != supplier_id
    ]


class SupplierBindingEnforcer:
    """Checks and applies supplier bindings for the products of a purchase."""

    def __init__(self, products: IProductStore):
        self._products = products

    async def enforce(
        self, supplier_id: int | None, products: Iterable[Product]
    ) -> list[int]:
        """
        Fail before any write if a product belongs to another supplier, then
        bind every still-unbound product to supplier_id.

        Purchases without a supplier neither conflict nor bind.

        Returns:
            IDs of the products that were bound by this call.
        """
        if supplier_id is None:
            return []

        products = list(products)
        conflicts = find_binding_conflicts(supplier_id, products)
        if conflicts:
            logger.warning(
                "supplier_binding_conflict",
                supplier_id=supplier_id,
                conflicts=len(conflicts),
            )
            raise SupplierBindingError(supplier_id, conflicts)

        bound: list[int] = []
        for product in products:
            if product.supplier_id is not None or product.id in bound:
                continue
            if await self._products.bind_supplier(product.id, supplier_id):  # type: ignore[arg-type]
                bound.append(product.id)  # type: ignore[arg-type]
            else:
                # Bound by someone else since it was read
                fresh = await self._products.get(product.id)  # type: ignore[arg-type]
                if fresh is not None and fresh.supplier_id != supplier_id:
                    raise SupplierBindingError(
                        supplier_id, find_binding_conflicts(supplier_id, [fresh])
                    )
            product.supplier_id = supplier_id

        if bound:
            logger.info("supplier_bound", supplier_id=supplier_id, product_ids=bound)
        return bound
