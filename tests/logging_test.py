import pytest
import structlog

from sbomgate.core.logging import drop_style_processor
from sbomgate.core.logging import RichConsoleRenderer


def test_drop_style_processor():
    event = {'event': 'x', '_style': 'dim'}
    assert drop_style_processor(None, 'info', event) == {'event': 'x'}


def test_rich_renderer_prints_and_drops(capsys):
    renderer = RichConsoleRenderer()
    with pytest.raises(structlog.DropEvent):
        renderer(None, 'info', {
            'event': 'Found vulnerabilities', 'level': 'info', 'logger': 'enricher',
            'count': 2, 'purl': 'pkg:npm/a@1', 'request_id': 'abc',
        })
    err = capsys.readouterr().err
    assert 'Found vulnerabilities' in err
    assert 'request_id' in err
    assert err.index('request_id') < err.index('count')
