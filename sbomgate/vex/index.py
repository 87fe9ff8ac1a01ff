from collections.abc import Iterable
from typing import Protocol

import structlog

from sbomgate.models.vex import VexDocument
from sbomgate.models.vex import VexMatch
from sbomgate.vex.query import parse_query
from sbomgate.vex.query import Term

logger = structlog.get_logger('vex_index')


class VexIndex(Protocol):
    """Query primitive implemented by every VEX index backend."""

    def search(self, query: str, offset: int, limit: int) -> list[VexMatch]:
        """Return matches for `query`, windowed by offset/limit. Raises VexQueryError."""
        ...


class MemoryVexIndex:
    """
    VEX index held in process memory.

    Documents are sorted by (advisory, cve) at build time and an inverted
    map from purl to document positions serves `affected:` terms, which is
    the only term the gateway issues on its hot path. Other terms fall back
    to a scan over the candidate set.
    """

    def __init__(self, documents: Iterable[VexDocument] = ()):
        self._documents = sorted(documents, key=lambda d: (d.advisory, d.cve))
        self._by_affected: dict[str, list[int]] = {}
        for pos, doc in enumerate(self._documents):
            for purl in dict.fromkeys(doc.affected):
                self._by_affected.setdefault(purl, []).append(pos)

    def __len__(self) -> int:
        return len(self._documents)

    @staticmethod
    def _matches(doc: VexDocument, term: Term) -> bool:
        if term.field == 'affected':
            return term.value in doc.affected
        if term.field in ('cve', 'advisory'):
            return getattr(doc, term.field) == term.value
        needle = term.value.lower()
        if term.field is not None:
            return needle in getattr(doc, term.field).lower()
        return any(
            needle in text.lower()
            for text in (doc.cve, doc.advisory, doc.title, doc.description)
        )

    def search(self, query: str, offset: int, limit: int) -> list[VexMatch]:
        terms = parse_query(query)

        candidates: Iterable[int] = range(len(self._documents))
        for term in terms:
            if term.field == 'affected':
                candidates = self._by_affected.get(term.value, [])
                break

        hits = [
            self._documents[pos] for pos in candidates
            if all(self._matches(self._documents[pos], t) for t in terms)
        ]
        window = hits[offset:offset + limit]
        logger.debug('VEX query', query=query, hits=len(hits), returned=len(window))
        return [
            VexMatch(cve=doc.cve, advisory=doc.advisory, title=doc.title)
            for doc in window
        ]
