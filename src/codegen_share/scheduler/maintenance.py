"""Maintenance scheduler: quota window reset and expired-artifact sweep.

Both jobs run on fixed intervals inside the application event loop. A
failing run is logged and the next run tries again; a failure never stops
the scheduler.
"""

from typing import Any

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from structlog import get_logger

from codegen_share.quota.limiter import RateLimiter
from codegen_share.sharing.store import SharedArtifactStore


logger = get_logger(__name__)

QUOTA_RESET_JOB_ID = "quota_reset"
ARTIFACT_SWEEP_JOB_ID = "artifact_sweep"


class MaintenanceScheduler:
    """Owns the periodic jobs of the service.

    Features:
    - Resets every account's quota once per window
    - Deletes expired shared artifacts on a slower cadence
    - Jobs never overlap with themselves; missed runs are coalesced
    """

    def __init__(
        self,
        limiter: RateLimiter,
        artifacts: SharedArtifactStore,
        reset_interval: int = 60,
        sweep_interval: int = 3600,
    ) -> None:
        """Initialize the maintenance scheduler.

        Args:
            limiter: Rate limiter whose counters are reset
            artifacts: Artifact store to sweep
            reset_interval: Seconds between quota resets
            sweep_interval: Seconds between expired-artifact sweeps

        """
        self.limiter = limiter
        self.artifacts = artifacts
        self.reset_interval = reset_interval
        self.sweep_interval = sweep_interval
        self._scheduler: Any = None  # AsyncIOScheduler from apscheduler
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start the scheduler in the running event loop."""
        if self._running:
            logger.warning("maintenance_scheduler_already_running")
            return

        self._scheduler = AsyncIOScheduler()
        self._scheduler.add_job(
            self.run_quota_reset,
            "interval",
            seconds=self.reset_interval,
            id=QUOTA_RESET_JOB_ID,
            name="Quota Reset",
            max_instances=1,
            coalesce=True,
        )
        self._scheduler.add_job(
            self.run_artifact_sweep,
            "interval",
            seconds=self.sweep_interval,
            id=ARTIFACT_SWEEP_JOB_ID,
            name="Expired Artifact Sweep",
            max_instances=1,
            coalesce=True,
        )

        self._scheduler.start()
        self._running = True

        logger.info(
            "maintenance_scheduler_started",
            reset_interval=self.reset_interval,
            sweep_interval=self.sweep_interval,
        )

    async def stop(self) -> None:
        """Stop the scheduler."""
        if not self._running:
            return

        if self._scheduler:
            self._scheduler.shutdown(wait=False)
            self._scheduler = None

        self._running = False
        logger.info("maintenance_scheduler_stopped")

    async def run_quota_reset(self) -> int:
        """Reset every account's quota. Returns accounts reset, 0 on failure."""
        try:
            return await self.limiter.reset_all()
        except Exception as e:
            logger.error("quota_reset_failed", error=str(e), exc_info=e)
            return 0

    async def run_artifact_sweep(self) -> int:
        """Purge expired artifacts. Returns artifacts deleted, 0 on failure."""
        try:
            return await self.artifacts.purge_expired()
        except Exception as e:
            logger.error("artifact_sweep_failed", error=str(e), exc_info=e)
            return 0

    def job_ids(self) -> list[str]:
        """Ids of the scheduled jobs, empty when stopped."""
        if self._scheduler is None:
            return []
        return [job.id for job in self._scheduler.get_jobs()]
