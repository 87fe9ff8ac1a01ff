import asyncio

from sbomgate.models.vex import VexDocument
from sbomgate.vex.index import MemoryVexIndex
from sbomgate.vex.shared import SharedIndex


async def test_readers_share_access():
    shared = SharedIndex(MemoryVexIndex())
    async with shared.read():
        async with shared.read():
            assert shared.readers == 2
    assert shared.readers == 0


async def test_writer_waits_for_readers():
    shared = SharedIndex(MemoryVexIndex())
    events = []

    async def writer():
        async with shared.write():
            events.append('write')

    async with shared.read():
        task = asyncio.create_task(writer())
        await asyncio.sleep(0.01)
        assert not task.done()
        events.append('read-done')
    await task

    assert events == ['read-done', 'write']


async def test_waiting_writer_blocks_new_readers():
    shared = SharedIndex(MemoryVexIndex())
    events = []

    async def writer():
        async with shared.write():
            events.append('write')

    async def reader():
        async with shared.read():
            events.append('read')

    async with shared.read():
        w = asyncio.create_task(writer())
        await asyncio.sleep(0.01)
        r = asyncio.create_task(reader())
        await asyncio.sleep(0.01)
        assert not w.done()
        assert not r.done()
    await asyncio.gather(w, r)

    assert events == ['write', 'read']


async def test_cancelled_writer_releases_readers():
    shared = SharedIndex(MemoryVexIndex())

    async def writer():
        async with shared.write():
            pass

    async def read_once():
        async with shared.read():
            return shared.readers

    async with shared.read():
        w = asyncio.create_task(writer())
        await asyncio.sleep(0.01)
        w.cancel()
        await asyncio.sleep(0.01)
        # A new reader gets in once the writer gave up
        assert await asyncio.wait_for(read_once(), timeout=1) == 2


async def test_replace_swaps_index():
    shared = SharedIndex(MemoryVexIndex())
    await shared.replace(MemoryVexIndex([
        VexDocument(cve='CVE-2024-9', affected=['pkg:npm/a@1']),
    ]))

    async with shared.read() as index:
        matches = index.search('affected:"pkg:npm/a@1"', 0, 10)
    assert [m.cve for m in matches] == ['CVE-2024-9']
