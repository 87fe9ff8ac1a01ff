import json

from sbomgate.models.package import PackageSummary
from sbomgate.models.package import RawOccurrence
from sbomgate.models.package import SbomSearchResult
from sbomgate.models.package import SearchResult


def test_raw_occurrence_from_wire(occurrence):
    raw = RawOccurrence.model_validate(occurrence('pkg:npm/a@1', 'app1', extra_field=1))
    assert raw.content_hash == 'abc123'
    assert raw.dependent == 'app1'


def test_raw_occurrence_defaults():
    raw = RawOccurrence.model_validate({'purl': 'pkg:npm/a@1'})
    assert raw.name == ''
    assert raw.dependent == ''


def test_sbom_search_result_ignores_unknown():
    data = SbomSearchResult.model_validate_json('{"result": [{"purl": "p"}], "total": 1, "took": 3}')
    assert data.total == 1
    assert data.result[0].purl == 'p'


def test_package_summary_wire_fields():
    summary = PackageSummary(purl='pkg:npm/a@1', content_hash='ff', dependents=['x'])
    dumped = summary.model_dump(by_alias=True)
    assert set(dumped) == {
        'purl', 'name', 'sha256', 'license', 'classifier', 'supplier',
        'description', 'dependents', 'vulnerabilities',
    }
    assert dumped['sha256'] == 'ff'


def test_search_result_envelope():
    envelope = SearchResult[list[PackageSummary]](
        total=1, result=[PackageSummary(purl='p')],
    )
    body = json.loads(envelope.model_dump_json(by_alias=True))
    assert body['total'] == 1
    assert body['result'][0]['purl'] == 'p'
    assert body['result'][0]['vulnerabilities'] == []
