from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import field_validator


class VexDocument(BaseModel):
    """A single VEX statement as stored in the index."""
    advisory: str = ''
    cve: str
    title: str = ''
    description: str = ''
    affected: list[str] = Field(default_factory=list)

    model_config = ConfigDict(extra='ignore')

    @field_validator('affected', mode='before')
    @classmethod
    def parse_affected(cls, v):
        if not v:
            return []
        if isinstance(v, str):
            return [v]
        return v


class VexMatch(BaseModel):
    """One hit returned by a VEX index query."""
    cve: str
    advisory: str = ''
    title: str = ''
