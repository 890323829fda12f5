# backend/fintrack/schemas/base.py
"""
Shared base model for API schemas.

Python attributes stay snake_case; the JSON wire format is camelCase
(``challenge_token`` <-> ``challengeToken``). Both spellings are accepted
on input.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )
