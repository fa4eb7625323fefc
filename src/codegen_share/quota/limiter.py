"""Fixed-window per-account rate limiter.

Every account carries a counter that quota-guarded operations decrement.
A scheduled job puts every counter back to the ceiling once per window, so
the window is aligned to the job cadence rather than to each account's
first request.
"""

from structlog import get_logger

from codegen_share.exceptions import QuotaExceededError
from codegen_share.storage.base import AccountStore


logger = get_logger(__name__)


class RateLimiter:
    """Decrements and replenishes account quota counters."""

    def __init__(
        self,
        store: AccountStore,
        ceiling: int = 50,
        reset_interval_seconds: int = 60,
    ) -> None:
        """Initialize the limiter.

        Args:
            store: Account storage holding the counters
            ceiling: Value every counter is reset to
            reset_interval_seconds: Window length, reported as the retry hint

        """
        self.store = store
        self.ceiling = ceiling
        self.reset_interval_seconds = reset_interval_seconds

    async def try_consume(self, account_id: int) -> int:
        """Consume one unit of the account's quota.

        Returns:
            Requests left in the current window

        Raises:
            QuotaExceededError: If the counter is already zero
            NotFoundError: If the account does not exist

        """
        remaining = await self.store.consume_quota(account_id)
        if remaining is None:
            logger.info("quota_exhausted", account_id=account_id)
            raise QuotaExceededError(retry_after=self.reset_interval_seconds)
        return remaining

    async def reset(self, account_id: int) -> bool:
        """Put one account's counter back to the ceiling."""
        return await self.store.set_quota(account_id, self.ceiling)

    async def reset_all(self) -> int:
        """Put every account's counter back to the ceiling.

        Returns:
            Number of accounts reset

        """
        count = await self.store.set_all_quotas(self.ceiling)
        logger.debug("quota_reset_all", accounts=count, ceiling=self.ceiling)
        return count
