# Painter configuration: the tunable parameters of a painting run.
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Shape(str, Enum):
    CIRCLE = "circle"
    SQUARE = "square"
    HEXAGON = "hexagon"
    ROUNDED_SQUARE = "roundedsquare"
    POLYGON = "polygon"

    @classmethod
    def parse(cls, name):
        """
        Looks up a shape by name, ignoring case, dashes and underscores.
        """
        if isinstance(name, cls):
            return name
        key = str(name).strip().lower().replace("-", "").replace("_", "")
        try:
            return cls(key)
        except ValueError:
            choices = ", ".join(s.value for s in cls)
            raise ValueError(f"Unknown shape '{name}', expected one of: {choices}") from None


class PainterConfig(BaseModel):
    """
    Immutable bundle of painting parameters, validated once at construction.

    Sizes are in destination pixels. Alpha is on the 0-255 opacity scale;
    stroke_reduction is the fraction of the stroke size removed each
    iteration and alpha_increase is added to alpha each iteration.
    """
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    dest_width: int = Field(1920, gt=0, description="Canvas width in pixels")
    dest_height: int = Field(1080, gt=0, description="Canvas height in pixels")
    stroke_ratio: float = Field(0.75, gt=0.0, description="Initial stroke size as a fraction of the width")
    initial_alpha: float = Field(0.1, ge=0.0)
    stroke_reduction: float = Field(0.002, ge=0.0, lt=1.0)
    alpha_increase: float = Field(0.06, ge=0.0)
    stroke_inversion_threshold: float = Field(0.05, ge=0.0)
    stroke_jitter: int = Field(200, ge=0, description="Positional jitter in pixels")
    min_edge_count: int = Field(3, ge=3)
    max_edge_count: int = Field(8, ge=3)
    rotation_jitter: float = Field(0.5, ge=0.0, description="Rotation jitter in radians")
    shape: Shape = Shape.POLYGON
    fill: bool = True
    stroke: bool = True

    @field_validator("shape", mode="before")
    @classmethod
    def normalize_shape(cls, v):
        return Shape.parse(v)

    @model_validator(mode="after")
    def check_edge_range(self) -> "PainterConfig":
        if self.min_edge_count > self.max_edge_count:
            raise ValueError(
                f"min_edge_count ({self.min_edge_count}) must not exceed "
                f"max_edge_count ({self.max_edge_count})"
            )
        return self

    @property
    def initial_stroke_size(self):
        return self.stroke_ratio * self.dest_width

    @property
    def inversion_stroke_size(self):
        """Stroke size at or below which outlines switch to a contrast color."""
        return self.stroke_inversion_threshold * self.initial_stroke_size
