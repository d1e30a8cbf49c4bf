"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - JSON keys are camelCase on the wire; Python attributes stay snake_case
    - No response schema exposes password_hash

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for every wire schema: camelCase aliases, attribute loading."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
