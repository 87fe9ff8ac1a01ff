from sbomgate.models.package import RawOccurrence
from sbomgate.services.deduplicator import deduplicate


def rows(*pairs, **fields):
    return [RawOccurrence(purl=purl, dependent=dep, **fields) for purl, dep in pairs]


class TestDeduplicate:
    """Tests for collapsing SBOM occurrences into package summaries."""

    def test_scenario_two_packages(self):
        """Three occurrences over two purls give two canonical packages."""
        packages = deduplicate(rows(
            ('pkg:npm/a@1', 'app1'),
            ('pkg:npm/a@1', 'app2'),
            ('pkg:npm/b@1', 'app1'),
        ))
        assert len(packages) == 2
        assert packages['pkg:npm/a@1'].dependents == ['app1', 'app2']
        assert packages['pkg:npm/b@1'].dependents == ['app1']

    def test_one_package_per_distinct_purl(self):
        input_rows = rows(
            ('pkg:pypi/x@1', 'a'), ('pkg:pypi/y@1', 'a'), ('pkg:pypi/x@1', 'b'),
            ('pkg:pypi/z@2', 'c'), ('pkg:pypi/y@1', 'c'), ('pkg:pypi/x@1', 'a'),
        )
        packages = deduplicate(input_rows)
        assert len(packages) == len({r.purl for r in input_rows})
        assert set(packages) == {r.purl for r in input_rows}

    def test_dependents_unique_and_complete(self):
        input_rows = rows(
            ('pkg:npm/a@1', 'app1'), ('pkg:npm/a@1', 'app1'),
            ('pkg:npm/a@1', 'app3'), ('pkg:npm/a@1', 'app2'),
            ('pkg:npm/a@1', 'app3'),
        )
        dependents = deduplicate(input_rows)['pkg:npm/a@1'].dependents
        assert len(dependents) == len(set(dependents))
        assert set(dependents) == {r.dependent for r in input_rows}
        # First-seen order
        assert dependents == ['app1', 'app3', 'app2']

    def test_first_seen_fields_win(self):
        first = RawOccurrence(
            purl='pkg:npm/a@1', name='a', sha256='111', license='MIT',
            supplier='ACME', description='first', dependent='app1',
        )
        second = RawOccurrence(
            purl='pkg:npm/a@1', name='a-renamed', sha256='222', license='GPL-3.0',
            supplier='Other', description='second', dependent='app2',
        )
        package = deduplicate([first, second])['pkg:npm/a@1']
        assert package.name == 'a'
        assert package.content_hash == '111'
        assert package.license == 'MIT'
        assert package.supplier == 'ACME'
        assert package.description == 'first'
        assert package.dependents == ['app1', 'app2']

    def test_vulnerabilities_start_empty(self):
        packages = deduplicate(rows(('pkg:npm/a@1', 'app1')))
        assert packages['pkg:npm/a@1'].vulnerabilities == []

    def test_empty_input(self):
        assert deduplicate([]) == {}

    def test_input_not_mutated(self):
        input_rows = rows(('pkg:npm/a@1', 'app1'), ('pkg:npm/a@1', 'app2'))
        deduplicate(input_rows)
        assert [r.dependent for r in input_rows] == ['app1', 'app2']
