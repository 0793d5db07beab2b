"""Pydantic schemas for search results and responses."""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class TeamRef(BaseModel):
    """Team as embedded in a search result."""

    name: str


class SearchResult(BaseModel):
    """Member projection plus a similarity score."""

    id: int
    name: str
    email: Optional[str] = None
    role: Optional[str] = None
    description: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    profile_picture: Optional[str] = None
    team: Optional[TeamRef] = None
    similarity_score: float = Field(ge=0.0, le=1.0, description="Similarity in [0, 1]")
    highlighted_text: Optional[str] = Field(
        default=None, description="Description snippet with the first matched term marked"
    )


class SearchOutcome(BaseModel):
    """Result of one orchestrated search."""

    query: str
    results: List[SearchResult] = Field(default_factory=list)
    mode: Literal["semantic", "text"]

    @property
    def count(self) -> int:
        return len(self.results)


class SearchResponse(BaseModel):
    """Success payload of the semantic-search function."""

    success: Literal[True] = True
    query: str
    results: List[SearchResult]
    count: int
    timestamp: str


class ErrorResponse(BaseModel):
    """Error payload of the semantic-search function."""

    success: Literal[False] = False
    error: str
    timestamp: str


def clamp_score(value: Optional[float]) -> float:
    """Clamp a raw similarity into [0, 1]; None counts as 0."""
    if value is None:
        return 0.0
    return max(0.0, min(1.0, float(value)))
