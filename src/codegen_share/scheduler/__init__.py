"""Background maintenance jobs."""

from codegen_share.scheduler.maintenance import MaintenanceScheduler


__all__ = ["MaintenanceScheduler"]
