"""
Storage key naming for notices.

Every notice stores its values under keys built from its prefix, so several
notices can share one options table without colliding.
"""

TIME_FIELD = "time"
DISMISSED_FIELD = "dismissed"
ACTION_FIELD = "action"


def option_key(prefix: str, field: str) -> str:
    """Build the storage key for a notice field, e.g. 'demo_plugin_reviews_time'."""
    return f"{prefix}_reviews_{field}"


def default_prefix(slug: str) -> str:
    """Derive a key prefix from a notice slug."""
    return slug.replace("-", "_")
