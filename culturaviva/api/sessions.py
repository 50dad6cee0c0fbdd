"""In-memory registry of live navigation sessions served over HTTP.

Each session gets its own ``PushLocationProvider`` (the device posts fixes
to the API) and ``MapRenderAdapter``. Sessions live until they are
deleted or the app shuts down.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass

from culturaviva.config import Settings
from culturaviva.contracts.common import Destination
from culturaviva.contracts.enums import TravelProfile
from culturaviva.contracts.navigation import PositionFix
from culturaviva.services.navigation.location import PushLocationProvider
from culturaviva.services.navigation.map_render import MapRenderAdapter
from culturaviva.services.navigation.session import NavigationSession, RouteSource

logger = logging.getLogger(__name__)


class SessionNotFoundError(KeyError):
    """Raised when a session id is unknown (or already closed)."""


@dataclass
class SessionEntry:
    id: str
    session: NavigationSession
    location: PushLocationProvider
    map: MapRenderAdapter
    open_task: asyncio.Task | None = None


class SessionRegistry:
    def __init__(self, directions: RouteSource, settings: Settings | None = None):
        self._directions = directions
        self._settings = settings or Settings()
        self._entries: dict[str, SessionEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    async def create(
        self,
        destination: Destination,
        profile: TravelProfile = TravelProfile.WALKING,
        position: PositionFix | None = None,
    ) -> SessionEntry:
        """Create a session and open it.

        With an initial *position* the session is opened before returning;
        without one, opening runs in the background until the device
        posts its first fix (or the location timeout expires).
        """
        provider = PushLocationProvider(max_age_s=self._settings.position_max_age_s)
        map_adapter = MapRenderAdapter()
        session = NavigationSession(
            destination,
            self._directions,
            provider,
            profile=profile,
            settings=self._settings,
            map_adapter=map_adapter,
        )
        entry = SessionEntry(
            id=uuid.uuid4().hex, session=session, location=provider, map=map_adapter
        )
        self._entries[entry.id] = entry
        logger.info("Session %s created for %s", entry.id, destination.name)

        if position is not None:
            provider.seed(position)
            await session.open()
        else:
            entry.open_task = asyncio.create_task(session.open())
        return entry

    def get(self, session_id: str) -> SessionEntry:
        try:
            return self._entries[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None

    def close(self, session_id: str) -> None:
        entry = self._entries.pop(session_id, None)
        if entry is None:
            raise SessionNotFoundError(session_id)
        self._shutdown(entry)

    def close_all(self) -> None:
        while self._entries:
            _, entry = self._entries.popitem()
            self._shutdown(entry)

    @staticmethod
    def _shutdown(entry: SessionEntry) -> None:
        if entry.open_task is not None and not entry.open_task.done():
            entry.open_task.cancel()
        entry.session.close()
        logger.info("Session %s closed", entry.id)
