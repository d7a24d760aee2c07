from .stats_service import StatsCache, StatsRefresher

__all__ = ["StatsCache", "StatsRefresher"]
