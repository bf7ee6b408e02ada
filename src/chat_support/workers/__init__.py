"""Background workers."""

from chat_support.workers.monitor import CycleReport, MonitoringLoop

__all__ = ["CycleReport", "MonitoringLoop"]
