"""
Authentication Models

This module defines the authenticated caller context produced by JWT
verification and injected into protected routes.
"""

from typing import List
from pydantic import BaseModel, Field, ConfigDict


class UserContext(BaseModel):
    """
    Authenticated user context derived from a verified JWT.
    """

    username: str = Field(
        ...,
        min_length=1,
        description="Username of the caller on whose behalf the client acts.",
    )

    scopes: List[str] = Field(
        default_factory=list,
        description="List of scopes granted to the user for API access.",
    )

    client_id: str = Field(
        ...,
        min_length=1,
        description="Client identifier that issued the JWT.",
    )

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=False,
        extra="forbid",             # Prevents claim injection via unexpected fields
    )
