"""
Session — the cashier terminal's state and caches.

    from pawpos.session import TerminalSession

    session = TerminalSession(store, TerminalSettings.from_env())
    (await session.start()).unwrap()
"""

from pawpos.session._cache import Cached, SessionCache
from pawpos.session._terminal import TerminalSession

__all__ = ("Cached", "SessionCache", "TerminalSession")
