"""
Session Module - Manages play sessions.

A session represents one player at one puzzle:
- Created when the player starts playing
- Holds the engine and the recorder logging its events
- Restarted (with a new session number) when the player resets
- Ended when the player leaves

Sessions live in memory; their move logs live in the configured store.
"""

from .manager import SessionManager, Session

__all__ = [
    "SessionManager",
    "Session",
]
