"""
Query syntax shared by the VEX index backends.

A query is a whitespace separated list of terms that must all match:

    affected:"pkg:npm/lodash@4.17.20"   exact value in a field
    title:prototype                     unquoted single word
    "remote code execution"             phrase in any text field

Inside a quoted phrase, `\\"` and `\\\\` escape a quote and a backslash.
"""
from dataclasses import dataclass

from sbomgate.core.exceptions import VexQueryError

# Fields matched by exact value; the rest are substring matches
EXACT_FIELDS = frozenset({'affected', 'cve', 'advisory'})
TEXT_FIELDS = frozenset({'title', 'description'})
FIELDS = EXACT_FIELDS | TEXT_FIELDS


@dataclass(frozen=True)
class Term:
    field: str | None
    value: str


def quote(value: str) -> str:
    escaped = value.replace('\\', '\\\\').replace('"', '\\"')
    return f'"{escaped}"'


def affected_query(purl: str) -> str:
    """Query for every VEX statement whose affected list contains `purl`."""
    return f"affected:{quote(purl)}"


def _read_phrase(query: str, pos: int) -> tuple[str, int]:
    # pos points just past the opening quote
    chars = []
    while pos < len(query):
        c = query[pos]
        if c == '\\' and pos + 1 < len(query):
            chars.append(query[pos + 1])
            pos += 2
            continue
        if c == '"':
            return ''.join(chars), pos + 1
        chars.append(c)
        pos += 1
    raise VexQueryError(f"Unterminated phrase in query: {query!r}")


def parse_query(query: str) -> list[Term]:
    terms: list[Term] = []
    pos = 0
    while pos < len(query):
        if query[pos].isspace():
            pos += 1
            continue

        field = None
        end = pos
        while end < len(query) and not query[end].isspace() and query[end] not in ':"':
            end += 1
        if end < len(query) and query[end] == ':':
            field = query[pos:end]
            if field not in FIELDS:
                raise VexQueryError(f"Unknown field {field!r} in query")
            pos = end + 1

        if pos < len(query) and query[pos] == '"':
            value, pos = _read_phrase(query, pos + 1)
        else:
            end = pos
            while end < len(query) and not query[end].isspace():
                end += 1
            value = query[pos:end]
            pos = end
            if '"' in value:
                raise VexQueryError(f"Stray quote in query: {query!r}")

        if not value:
            raise VexQueryError(f"Empty term in query: {query!r}")
        terms.append(Term(field=field, value=value))

    if not terms:
        raise VexQueryError('Empty query')
    return terms
