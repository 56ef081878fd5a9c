"""Cache key generator.

Single source of truth for cache key shape. Invalidation rules match keys
with regular expressions, so every key written to a cache must come from
here to keep those patterns stable.
"""

from typing import Any, Mapping, Optional, Sequence, Tuple


class CacheKeyGenerator:
    """Pure, deterministic cache key builders.

    Keys are colon separated, e.g. ``users:list:role=Admin:page=1:limit=10``.
    Filter maps are sorted by key so that insertion order never changes
    the resulting key.
    """

    SEPARATOR = ":"

    # Known key namespaces, longest first so the most specific one wins.
    NAMESPACES: Tuple[str, ...] = (
        "users:list",
        "users:stats",
        "user:roles",
        "performance",
        "user",
        "db",
        "api",
    )

    @staticmethod
    def _format_value(value: Any) -> str:
        if value is None:
            return "null"
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (list, tuple)):
            return ",".join(CacheKeyGenerator._format_value(item) for item in value)
        return str(value)

    @classmethod
    def filter_string(cls, filters: Optional[Mapping[str, Any]]) -> str:
        """Render a filter map as ``a=1&b=2`` with keys sorted."""
        if not filters:
            return ""
        return "&".join(
            f"{key}={cls._format_value(filters[key])}" for key in sorted(filters)
        )

    @classmethod
    def users_list(cls, filters: Optional[Mapping[str, Any]], page: int, limit: int) -> str:
        return f"users:list:{cls.filter_string(filters)}:page={page}:limit={limit}"

    @staticmethod
    def user_by_id(user_id: str) -> str:
        return f"user:{user_id}"

    @staticmethod
    def user_stats() -> str:
        return "users:stats"

    @staticmethod
    def user_roles(user_id: str) -> str:
        return f"user:roles:{user_id}"

    @staticmethod
    def performance_stats() -> str:
        return "performance:stats"

    @staticmethod
    def db_status() -> str:
        return "db:status"

    @classmethod
    def api_response(cls, path: str, query_items: Sequence[Tuple[str, str]] = ()) -> str:
        """Key for a whole HTTP response: ``api:<path>[:<sorted query>]``."""
        ordered = sorted(query_items, key=lambda item: item[0])
        query = "&".join(f"{name}={value}" for name, value in ordered)
        return f"api:{path}:{query}" if query else f"api:{path}"

    @classmethod
    def namespace_of(cls, key: str) -> str:
        """Resolve the namespace a key belongs to.

        Falls back to the first key segment for keys that were not built by
        this class.
        """
        for namespace in cls.NAMESPACES:
            if key == namespace or key.startswith(namespace + cls.SEPARATOR):
                return namespace
        return key.split(cls.SEPARATOR, 1)[0]
