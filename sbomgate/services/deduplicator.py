from collections.abc import Iterable

from sbomgate.models.package import PackageSummary
from sbomgate.models.package import RawOccurrence


def deduplicate(occurrences: Iterable[RawOccurrence]) -> dict[str, PackageSummary]:
    """
    Collapse backend rows into one PackageSummary per purl.

    The first occurrence of a purl supplies every descriptive field; later
    occurrences only contribute their dependent, which is appended once in
    first-seen order. The containment check is linear in the number of
    dependents of that one package.
    """
    packages: dict[str, PackageSummary] = {}
    for item in occurrences:
        entry = packages.get(item.purl)
        if entry is None:
            packages[item.purl] = PackageSummary.from_occurrence(item)
        elif item.dependent not in entry.dependents:
            entry.dependents.append(item.dependent)
    return packages
