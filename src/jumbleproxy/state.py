"""Application state container.

AppState is created once at server startup (inside the Starlette lifespan)
and stored on ``app.state.proxy``, where the dispatcher picks it up for every
request. Tests build it directly and pass it to ``create_app``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from jumbleproxy.config import Settings
    from jumbleproxy.forwarder import Forwarder
    from jumbleproxy.protocols import PreviewCacheProtocol
    from jumbleproxy.resolver import PreviewResolver


@dataclass
class AppState:
    """Holds all shared runtime state. Passed to every request handler."""

    settings: Settings
    cache: PreviewCacheProtocol
    resolver: PreviewResolver
    forwarder: Forwarder
