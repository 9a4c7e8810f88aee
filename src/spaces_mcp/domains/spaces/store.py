"""Record store interface for spaces.

The store is the system of record for which spaces exist and who owns
them. The provisioner only needs the small interface below; the in-memory
implementation backs the MCP server and the tests.
"""

from __future__ import annotations

import asyncio
from typing import Protocol

from spaces_mcp.domains.spaces.models import Space


class SpaceStore(Protocol):
    """Persistence contract consumed by the provisioner."""

    async def get(self, space_id: str) -> Space | None: ...

    async def save(self, space: Space) -> None: ...

    async def delete(self, space_id: str) -> None: ...

    async def list(self, owner_id: str | None = None) -> list[Space]: ...


class InMemorySpaceStore:
    """Process-local space records."""

    def __init__(self) -> None:
        self._spaces: dict[str, Space] = {}
        self._lock = asyncio.Lock()

    async def get(self, space_id: str) -> Space | None:
        return self._spaces.get(space_id)

    async def save(self, space: Space) -> None:
        async with self._lock:
            self._spaces[space.id] = space

    async def delete(self, space_id: str) -> None:
        async with self._lock:
            self._spaces.pop(space_id, None)

    async def list(self, owner_id: str | None = None) -> list[Space]:
        spaces = [s for s in self._spaces.values() if owner_id is None or s.owner_id == owner_id]
        return sorted(spaces, key=lambda s: s.created_at)
