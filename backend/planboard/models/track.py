"""
Track (factory) model definitions.
"""

from pydantic import BaseModel, ConfigDict, Field


class Track(BaseModel):
    """A horizontal row on the board, usually one factory."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Track ID")
    name: str = Field(..., min_length=1, max_length=200, description="Display name")
    type: str = Field(
        ...,
        min_length=1,
        description="Compatibility tag (see TrackType for known values)",
    )
