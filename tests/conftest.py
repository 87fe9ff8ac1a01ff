import pytest
import structlog
from aiohttp import web

from sbomgate.models.vex import VexDocument
from sbomgate.vex.index import MemoryVexIndex
from sbomgate.vex.shared import SharedIndex


def _occurrence(purl: str, dependent: str, **fields) -> dict:
    row = {
        'purl': purl,
        'name': purl.split('/')[-1].split('@')[0],
        'sha256': 'abc123',
        'license': 'MIT',
        'classifier': 'library',
        'supplier': 'Organization: ACME',
        'description': 'A package',
        'dependent': dependent,
    }
    row.update(fields)
    return row


@pytest.fixture
def occurrence():
    """Build one SBOM backend row."""
    return _occurrence


@pytest.fixture
def vex_documents():
    return [
        VexDocument(
            advisory='RHSA-2024:0001', cve='CVE-2024-1',
            title='Prototype pollution in a', affected=['pkg:npm/a@1'],
        ),
        VexDocument(
            advisory='RHSA-2024:0002', cve='CVE-2024-2',
            title='ReDoS in a and b', affected=['pkg:npm/a@1', 'pkg:npm/b@1'],
        ),
        VexDocument(
            advisory='RHSA-2024:0003', cve='CVE-2024-3',
            title='Unrelated', affected=['pkg:npm/c@1'],
        ),
    ]


@pytest.fixture
def shared_index(vex_documents):
    return SharedIndex(MemoryVexIndex(vex_documents))


@pytest.fixture
def backend_app():
    """Factory for a fake SBOM backend; returns the app and the list of query params it received."""
    def factory(rows=None, status=200, body=None, documents=None):
        app = web.Application()
        calls: list[dict] = []

        async def search(request):
            calls.append(dict(request.query))
            if status != 200:
                return web.Response(status=status, text='upstream failure')
            if body is not None:
                return web.Response(text=body, content_type='application/json')
            return web.json_response({'result': rows or [], 'total': len(rows or [])})

        async def fetch(request):
            calls.append(dict(request.query))
            doc = (documents or {}).get(request.query.get('id'))
            if doc is None:
                return web.Response(status=404, text='no such SBOM')
            return web.Response(
                body=doc, content_type='application/json',
                headers={'Content-Disposition': 'attachment; filename="sbom.json"'},
            )

        app.router.add_get('/api/v1/sbom/search', search)
        app.router.add_get('/api/v1/sbom', fetch)
        return app, calls
    return factory


@pytest.fixture(autouse=True)
def reset_structlog():
    """CLI tests configure structlog with logger caching; undo that between tests."""
    yield
    structlog.reset_defaults()
