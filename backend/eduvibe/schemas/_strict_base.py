"""Schema baselines that forbid unexpected fields."""

from pydantic import BaseModel, ConfigDict


class StrictRequestModel(BaseModel):
    """Request DTO base that always forbids unexpected fields."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


class FrozenModel(BaseModel):
    """Immutable value object validated once at the boundary."""

    model_config = ConfigDict(extra="forbid", frozen=True, str_strip_whitespace=True)
