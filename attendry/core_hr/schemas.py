"""Core HR Pydantic v2 schemas."""

import uuid
from typing import List

from pydantic import BaseModel, ConfigDict


class LeaderboardEntry(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    rank: int
    id: uuid.UUID
    name: str
    points: int
    streak: int


class LeaderboardResponse(BaseModel):
    data: List[LeaderboardEntry]
    total: int
