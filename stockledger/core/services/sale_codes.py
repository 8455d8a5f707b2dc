"""Sale code allocation: PREFIX-YYYYMMDD-NNNN, sequential per calendar day."""

from datetime import date

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
)

from stockledger.config import get_logger
from stockledger.core.entities.sale import Sale, utc_today
from stockledger.core.exceptions import SaleCodeConflictError, SaleCodeExhaustedError
from stockledger.core.interfaces.sale_store import ISaleStore

logger = get_logger(__name__)


def format_sale_code(prefix: str, day: date, number: int, digits: int = 4) -> str:
    return f"{prefix}-{day.strftime('%Y%m%d')}-{number:0{digits}d}"


class SaleCodeAllocator:
    """
    Draws the next number from the per-day sequence and inserts the sale
    under that code. The sequence lives in the same transaction as the
    sale, so a rolled-back sale also gives its number back.

    A unique constraint on the code is the last line of defence: when an
    insert collides (codes written outside the sequence), the next number
    is drawn, up to max_retries attempts.
    """

    def __init__(
        self,
        sales: ISaleStore,
        prefix: str = "INV",
        digits: int = 4,
        max_retries: int = 5,
    ):
        self._sales = sales
        self._prefix = prefix
        self._digits = digits
        self._max_retries = max_retries

    async def create(self, sale: Sale, day: date | None = None) -> Sale:
        day = day or utc_today()
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self._max_retries),
                retry=retry_if_exception_type(SaleCodeConflictError),
                before_sleep=self._log_collision,
            ):
                with attempt:
                    number = await self._sales.next_sequence(day)
                    sale.sale_code = format_sale_code(self._prefix, day, number, self._digits)
                    return await self._sales.create(sale)
        except RetryError:
            raise SaleCodeExhaustedError(day.isoformat(), self._max_retries) from None

    @staticmethod
    def _log_collision(retry_state: RetryCallState) -> None:
        logger.warning(
            "sale_code_collision",
            attempt=retry_state.attempt_number,
            error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
        )
