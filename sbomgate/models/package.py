from typing import Generic
from typing import TypeVar

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

T = TypeVar('T')


class RawOccurrence(BaseModel):
    """One SBOM backend row: a package as seen from a single dependent artifact."""
    purl: str
    name: str = ''
    content_hash: str = Field(alias='sha256', default='')
    license: str = ''
    classifier: str = ''
    supplier: str = ''
    description: str = ''
    dependent: str = ''

    model_config = ConfigDict(populate_by_name=True, extra='ignore')


class SbomSearchResult(BaseModel):
    """Body of the SBOM backend's search endpoint."""
    result: list[RawOccurrence] = Field(default_factory=list)
    total: int | None = None

    model_config = ConfigDict(extra='ignore')


class PackageSummary(BaseModel):
    """Canonical record for one purl, with every dependent and known vulnerability."""
    purl: str
    name: str = ''
    content_hash: str = Field(alias='sha256', default='')
    license: str = ''
    classifier: str = ''
    supplier: str = ''
    description: str = ''
    dependents: list[str] = Field(default_factory=list)
    vulnerabilities: list[str] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_occurrence(cls, item: RawOccurrence) -> 'PackageSummary':
        return cls(
            purl=item.purl,
            name=item.name,
            content_hash=item.content_hash,
            license=item.license,
            classifier=item.classifier,
            supplier=item.supplier,
            description=item.description,
            dependents=[item.dependent],
        )


class SearchResult(BaseModel, Generic[T]):
    """Envelope returned by the gateway search endpoint."""
    total: int | None = None
    result: T
