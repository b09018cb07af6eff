"""
Records held by the configuration store.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Prefix(BaseModel):
    """The command prefix configured for one guild."""

    guild_id: int = Field(ge=0, description="Discord guild (server) id")
    prefix_symbol: str = Field(description="Single character typed before a command token")

    model_config = ConfigDict(frozen=True)

    @field_validator("prefix_symbol")
    @classmethod
    def _single_character(cls, value: str) -> str:
        if len(value) != 1 or value.isspace():
            raise ValueError("prefix_symbol must be a single non-whitespace character")
        return value


class MutedUser(BaseModel):
    """Moderation state for one user. Users without a record are never muted."""

    user_id: int = Field(ge=0, description="Discord user id")
    is_muted: bool = Field(default=True)

    model_config = ConfigDict(frozen=True)
