from .stats import ListenerStatsPlugin

__all__ = ["ListenerStatsPlugin"]
