"""Authenticated caller context."""

from pydantic import BaseModel, ConfigDict, Field


class AuthContext(BaseModel):
    """
    Identity of the caller, built once at the boundary.

    Every core entry point takes this explicitly; the store it names
    scopes all catalog and ledger access.
    """

    model_config = ConfigDict(frozen=True)

    user_id: str = Field(min_length=1)
    store_id: str = Field(min_length=1)
