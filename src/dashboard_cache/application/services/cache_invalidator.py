"""Direct cache invalidation helpers.

Synchronous counterparts of the queued invalidation rules, for callers that
must drop entries right away without going through the event queue.
"""

import re
from typing import List, Optional

from ...core.value_objects.cache_key import CacheKeyGenerator
from .cache_manager import CacheManager


class CacheInvalidator:
    """Drops user, performance and database status entries immediately."""

    def __init__(self, cache_manager: CacheManager):
        self._cache_manager = cache_manager

    def invalidate_user(self, user_id: str) -> None:
        """Drop everything that may embed data of one user."""
        self._cache_manager.delete("users", CacheKeyGenerator.user_by_id(user_id))
        self._cache_manager.delete("users", CacheKeyGenerator.user_roles(user_id))
        self._cache_manager.invalidate_namespace("usersList", "users:list")
        self._cache_manager.delete("userStats", CacheKeyGenerator.user_stats())

    def invalidate_user_lists(self, affected_filters: Optional[List[str]] = None) -> None:
        """Drop user lists filtered on any of the given fields, or all lists."""
        if affected_filters:
            for filter_name in affected_filters:
                self._cache_manager.invalidate_pattern("usersList", f".*{re.escape(filter_name)}=.*")
        else:
            self._cache_manager.clear("usersList")
        self._cache_manager.delete("userStats", CacheKeyGenerator.user_stats())

    def invalidate_all_users(self) -> None:
        self._cache_manager.clear("users")
        self._cache_manager.clear("usersList")
        self._cache_manager.clear("userStats")

    def invalidate_performance(self) -> None:
        self._cache_manager.clear("performance")

    def invalidate_db_status(self) -> None:
        self._cache_manager.clear("dbStatus")
