"""Abstract unit of work spanning every store touched by one ledger operation."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from types import TracebackType

from stockledger.core.interfaces.inventory_log_store import IInventoryLogStore
from stockledger.core.interfaces.product_store import IProductStore
from stockledger.core.interfaces.purchase_store import IPurchaseStore
from stockledger.core.interfaces.sale_store import ISaleStore


class IUnitOfWork(ABC):
    """
    One transaction around one top-level operation.

    Usage:
        async with uow_factory() as uow:
            product = await uow.products.get(1)
            ...

    Leaving the block normally commits; leaving it with any exception
    (cancellation included) rolls back. Either happens exactly once.
    """

    products: IProductStore
    purchases: IPurchaseStore
    sales: ISaleStore
    inventory_log: IInventoryLogStore

    @abstractmethod
    async def __aenter__(self) -> "IUnitOfWork":
        pass

    @abstractmethod
    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        pass

    @abstractmethod
    async def commit(self) -> None:
        pass

    @abstractmethod
    async def rollback(self) -> None:
        pass


UnitOfWorkFactory = Callable[[], IUnitOfWork]
