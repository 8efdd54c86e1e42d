"""Event type constants.

Centralizing event names prevents typos and makes it easy to discover
every event a subscriber can receive on the stream.
"""

# ─── Article lifecycle ───────────────────────────────────

ARTICLE_CREATED = "article:created"
ARTICLE_UPDATED = "article:updated"
ARTICLE_DELETED = "article:deleted"

ARTICLE_EVENTS = (ARTICLE_CREATED, ARTICLE_UPDATED, ARTICLE_DELETED)
