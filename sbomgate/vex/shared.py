import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog

from sbomgate.vex.index import VexIndex

logger = structlog.get_logger('shared_index')


class SharedIndex:
    """
    Process-wide handle on a VEX index guarded by a reader/writer lock.

    Any number of readers may hold the index together; a writer (an index
    rebuild) holds it alone. Once a writer is waiting, new readers queue
    behind it so a steady stream of searches cannot starve a rebuild.

    Read access is meant to be held for the enrichment of ONE search
    response and released right after. While a reader holds it, a rebuild
    blocks; while a rebuild runs, every enrichment blocks. Do not hold the
    read guard across unrelated awaits (upstream HTTP calls, response
    writes).
    """

    def __init__(self, index: VexIndex):
        self._index = index
        self._cond = asyncio.Condition()
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @property
    def readers(self) -> int:
        return self._readers

    @asynccontextmanager
    async def read(self) -> AsyncIterator[VexIndex]:
        async with self._cond:
            await self._cond.wait_for(
                lambda: not self._writer and self._writers_waiting == 0,
            )
            self._readers += 1
        try:
            yield self._index
        finally:
            async with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @asynccontextmanager
    async def write(self) -> AsyncIterator[VexIndex]:
        async with self._cond:
            self._writers_waiting += 1
            try:
                await self._cond.wait_for(
                    lambda: not self._writer and self._readers == 0,
                )
            finally:
                self._writers_waiting -= 1
                # Readers parked behind a cancelled writer must re-check
                self._cond.notify_all()
            self._writer = True
        try:
            yield self._index
        finally:
            async with self._cond:
                self._writer = False
                self._cond.notify_all()

    async def replace(self, index: VexIndex) -> None:
        """Swap in a freshly built index under the write lock."""
        async with self.write():
            self._index = index
        logger.info('VEX index replaced', documents=_size(index))


def _size(index: VexIndex) -> int | None:
    try:
        return len(index)  # type: ignore[arg-type]
    except TypeError:
        return None
