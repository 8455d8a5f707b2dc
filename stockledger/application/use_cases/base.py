"""Shared plumbing for ledger use cases."""

from stockledger.core.interfaces.unit_of_work import IUnitOfWork, UnitOfWorkFactory


class LedgerUseCase:
    """Base for use cases that run inside one unit of work.

    The factory is injected in tests; production code falls back to the
    SQLite unit of work on the global connection pool.
    """

    readonly = False

    def __init__(self, uow_factory: UnitOfWorkFactory | None = None):
        self._uow_factory = uow_factory

    def _unit_of_work(self) -> IUnitOfWork:
        if self._uow_factory is None:
            from stockledger.infrastructure.storage.sqlite import (
                get_readonly_unit_of_work,
                get_unit_of_work,
            )

            self._uow_factory = get_readonly_unit_of_work if self.readonly else get_unit_of_work
        return self._uow_factory()
