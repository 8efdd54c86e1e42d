"""Newswire — news articles with real-time update streaming.

Articles are stored in a relational database and every mutation is
broadcast to connected browsers over Server-Sent Events.
"""

__version__ = "0.1.0"
