"""Shared configuration for Leon API payload models."""

from pydantic import BaseModel, ConfigDict


class LeonModel(BaseModel):
    """Frozen model that ignores unknown keys and reads numeric ids as text."""

    model_config = ConfigDict(
        frozen=True,
        extra='ignore',
        coerce_numbers_to_str=True,
        populate_by_name=True,
    )
