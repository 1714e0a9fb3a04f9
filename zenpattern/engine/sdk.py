#!/usr/bin/env python3
"""
Core SDK for the Zen Pattern engine

This module provides the single source of truth for constants, validated
generation parameters and the primitive drawing instructions that make up a
scene. All engine modules import their types from here.
"""

import hashlib
import json
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


# ============================================================================
# CONSTANTS
# ============================================================================

# Grid resolution is normalized against this reference canvas
REFERENCE_W = 900
REFERENCE_H = 700
MIN_GRID_CELLS = 4

BACKGROUND_FILL = "#071827"
MAX_SEED = 0xFFFFFFFF


class ShapeKind(str, Enum):
    CIRCLE = "circle"
    RECT = "rect"
    LINE = "line"
    PETAL = "petal"


# ============================================================================
# ERRORS
# ============================================================================

class InvalidParameterError(ValueError):
    """Raised when generation parameters fail validation. No scene is produced."""

    def __init__(self, message: str, fields: Optional[List[str]] = None):
        super().__init__(message)
        self.fields = fields or []


# ============================================================================
# PYDANTIC MODELS
# ============================================================================

class GenerationParameters(BaseModel):
    """Immutable inputs for one generation run."""

    model_config = ConfigDict(frozen=True, extra="forbid", allow_inf_nan=False)

    seed: int = Field(..., ge=0, le=MAX_SEED, description="32-bit unsigned seed")
    complexity: int = Field(..., ge=0, description="Drives grid resolution")
    density: float = Field(..., ge=0.0, le=1.0, description="Probability a grid cell is occupied")
    palette_size: int = Field(..., ge=1, description="Number of palette colors")
    shape: ShapeKind = Field(..., description="Motif shape kind")
    canvas_width: float = Field(default=float(REFERENCE_W), gt=0, description="Canvas width")
    canvas_height: float = Field(default=float(REFERENCE_H), gt=0, description="Canvas height")

    @field_validator("shape", mode="before")
    @classmethod
    def normalize_shape(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v


def build_parameters(
    raw: Optional[Mapping[str, Any]] = None, **overrides: Any
) -> GenerationParameters:
    """
    Validate a mapping (plus keyword overrides) into GenerationParameters.

    Raises:
        InvalidParameterError: listing every offending field
    """
    data: Dict[str, Any] = dict(raw or {})
    data.update(overrides)
    try:
        return GenerationParameters(**data)
    except ValidationError as e:
        fields = sorted({".".join(str(p) for p in err["loc"]) or "<root>" for err in e.errors()})
        raise InvalidParameterError(
            f"Invalid generation parameters: {', '.join(fields)}", fields=fields
        ) from e


def parameters_fingerprint(params: GenerationParameters) -> str:
    """Deterministic cache key for a parameter set."""
    sorted_params = json.dumps(params.model_dump(mode="json"), sort_keys=True)
    return hashlib.sha1(sorted_params.encode()).hexdigest()


# ============================================================================
# PRIMITIVE INSTRUCTIONS
# ============================================================================

Point = Tuple[float, float]


@dataclass(frozen=True)
class Ellipse:
    cx: float
    cy: float
    rx: float
    ry: float
    fill: str
    fill_opacity: float
    rotation: float = 0.0

    kind: ClassVar[str] = "ellipse"

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, **asdict(self)}


@dataclass(frozen=True)
class Rectangle:
    """Axis-aligned rectangle, rotated about its own center."""

    x: float
    y: float
    width: float
    height: float
    fill: str
    fill_opacity: float = 1.0
    corner_radius: float = 0.0
    rotation: float = 0.0

    kind: ClassVar[str] = "rect"

    @property
    def center(self) -> Point:
        return (self.x + self.width / 2, self.y + self.height / 2)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, **asdict(self)}


@dataclass(frozen=True)
class LineSegment:
    x1: float
    y1: float
    x2: float
    y2: float
    stroke: str
    stroke_width: float
    opacity: float

    kind: ClassVar[str] = "line"

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, **asdict(self)}


@dataclass(frozen=True)
class Group:
    children: Tuple["PrimitiveInstruction", ...]
    rotation: float = 0.0
    rotation_center: Point = field(default=(0.0, 0.0))

    kind: ClassVar[str] = "group"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "children": [child.to_dict() for child in self.children],
            "rotation": self.rotation,
            "rotation_center": list(self.rotation_center),
        }


PrimitiveInstruction = Union[Ellipse, Rectangle, LineSegment, Group]
Scene = List[PrimitiveInstruction]


def scene_to_dicts(scene: Scene) -> List[Dict[str, Any]]:
    return [instruction.to_dict() for instruction in scene]


def scene_fingerprint(scene: Scene) -> str:
    """sha1 over the canonical JSON form of a scene."""
    payload = json.dumps(scene_to_dicts(scene), sort_keys=True)
    return hashlib.sha1(payload.encode()).hexdigest()
