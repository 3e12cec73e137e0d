"""UHF Scheduler: channel document engine for UHF broadcast schedules."""

__version__ = "0.1.0"
