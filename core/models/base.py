# =============================================================================
# core/models/base.py - Shared Model Base
# =============================================================================
# The dashboard speaks camelCase JSON (publicId, subscriptionTier,
# vehicleInfo). CamelModel accepts both camelCase and snake_case on input
# and serializes camelCase when dumped with by_alias=True (FastAPI does this
# for response_model automatically).
# =============================================================================

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_wire(self, **kwargs: Any) -> dict[str, Any]:
        """Dump with camelCase keys, dropping unset optional fields."""
        kwargs.setdefault("exclude_none", True)
        return self.model_dump(by_alias=True, **kwargs)
