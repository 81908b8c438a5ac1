"""Config schemas and path models, validated with pydantic.

Provides:
    - Raster tracing config: Sobel threshold, contour noise floor, tolerance
    - Freehand refine config: stage toggles and per-stage parameters
    - Vectorizer file schema (vectorizer.v1.yaml) bundling both
    - TracedPath: polyline + arc length + id, the unit handed to renderers
      and G-code generators
    - Paths file schema (penpath.paths.v1) for the CLI output

Config models are frozen: a config is a plain value passed per call, never
shared mutable state.

Usage:
    from penpath.utils import validators

    cfg = validators.load_vectorizer_config("configs/vectorizer.v1.yaml")
    paths = tracer.trace_image(buf, w, h, cfg.raster)
"""

from pathlib import Path
from typing import List, Tuple, Union

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


# ============================================================================
# RASTER TRACING
# ============================================================================

class EdgeDetectionConfig(BaseModel):
    """Sobel edge detection settings."""
    model_config = ConfigDict(frozen=True)

    threshold: float = Field(128.0, ge=0.0, description="Gradient magnitude above which a pixel is an edge")


class ContourConfig(BaseModel):
    """Connected-component contour extraction settings."""
    model_config = ConfigDict(frozen=True)

    min_pixels: int = Field(10, ge=0, description="Components with fewer pixels are discarded as noise")


class RasterTraceConfig(BaseModel):
    """Raster image -> polylines settings.

    simplify_tolerance has no lower bound: a non-positive tolerance keeps
    every deviating point (near-identity simplification).
    """
    model_config = ConfigDict(frozen=True)

    edges: EdgeDetectionConfig = Field(default_factory=EdgeDetectionConfig)
    contours: ContourConfig = Field(default_factory=ContourConfig)
    simplify_tolerance: float = Field(1.5, description="Douglas-Peucker tolerance (px)")
    max_side_px: int = Field(400, ge=3, description="Longest image side after downscaling")
    close_distance_px: float = Field(10.0, ge=0.0, description="End gap below which a path counts as closed")
    min_path_points: int = Field(3, ge=2, description="Simplified paths with fewer points are dropped")


# ============================================================================
# FREEHAND REFINEMENT
# ============================================================================

class RefineConfig(BaseModel):
    """Freehand stroke refinement: jitter -> simplify -> smooth -> resample.

    Disabling a stage passes its input through unchanged.
    """
    model_config = ConfigDict(frozen=True)

    remove_jitter: bool = Field(True, description="Enable jitter removal")
    simplify: bool = Field(True, description="Enable Douglas-Peucker simplification")
    smooth: bool = Field(True, description="Enable Laplacian smoothing")
    resample: bool = Field(True, description="Enable fixed-spacing resampling")
    jitter_min_distance: float = Field(3.0, ge=0.0, description="Minimum distance between kept samples")
    simplify_tolerance: float = Field(3.0, description="Douglas-Peucker tolerance")
    smoothing_factor: float = Field(0.5, ge=0.0, le=1.0, description="Smoothing strength, 0 disables")
    resample_spacing: float = Field(5.0, gt=0.0, description="Arc-length spacing of resampled points")

    @classmethod
    def for_smoothing(cls, smoothing_factor: float, **overrides) -> 'RefineConfig':
        """Config matching the drawing surface's smoothing slider.

        A factor of 0 means "raw stroke": jitter removal, simplification and
        smoothing are all switched off and only resampling runs.
        """
        enabled = smoothing_factor > 0
        params = {
            'remove_jitter': enabled,
            'simplify': enabled,
            'smooth': enabled,
            'smoothing_factor': smoothing_factor,
        }
        params.update(overrides)
        return cls(**params)


# ============================================================================
# VECTORIZER CONFIG FILE (vectorizer.v1)
# ============================================================================

class VectorizerV1(BaseModel):
    """Top-level config file bundling raster and freehand settings."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    schema_version: str = Field("vectorizer.v1", alias="schema", description="Schema version")
    raster: RasterTraceConfig = Field(default_factory=RasterTraceConfig)
    freehand: RefineConfig = Field(default_factory=RefineConfig)

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != "vectorizer.v1":
            raise ValueError(f"Expected schema 'vectorizer.v1', got '{v}'")
        return v


# ============================================================================
# PATH OUTPUT
# ============================================================================

class TracedPath(BaseModel):
    """Finished polyline exchanged with renderers and G-code generators."""
    id: str = Field(..., description="Identifier unique within one pipeline call")
    source: str = Field(..., description="Producer: 'freehand' or 'raster'")
    points: List[Tuple[float, float]] = Field(..., description="Polyline points (x, y)")
    length: float = Field(..., ge=0.0, description="Arc length")
    closed: bool = Field(False, description="First and last points nearly coincide")

    @field_validator('source')
    @classmethod
    def validate_source(cls, v: str) -> str:
        allowed = {"freehand", "raster"}
        if v not in allowed:
            raise ValueError(f"source must be one of {allowed}, got '{v}'")
        return v

    def as_array(self) -> np.ndarray:
        """Points as a float64 (N, 2) array."""
        return np.asarray(self.points, dtype=np.float64).reshape(-1, 2)


class PathsFileV1(BaseModel):
    """Serialized trace output (penpath.paths.v1)."""
    model_config = ConfigDict(populate_by_name=True)

    schema_version: str = Field("penpath.paths.v1", alias="schema", description="Schema version")
    render_px: List[int] = Field(..., description="Traced resolution [W, H]")
    paths: List[TracedPath] = Field(..., description="Traced paths")

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != "penpath.paths.v1":
            raise ValueError(f"Expected schema 'penpath.paths.v1', got '{v}'")
        return v

    @field_validator('render_px')
    @classmethod
    def validate_render_px(cls, v: List[int]) -> List[int]:
        if len(v) != 2:
            raise ValueError(f"render_px must have 2 elements [W, H], got {len(v)}")
        if v[0] <= 0 or v[1] <= 0:
            raise ValueError(f"render_px dimensions must be positive, got {v}")
        return v


# ============================================================================
# PUBLIC API
# ============================================================================

def load_vectorizer_config(path: Union[str, Path]) -> VectorizerV1:
    """Load and validate a vectorizer config from YAML.

    Parameters
    ----------
    path : Union[str, Path]
        Path to a vectorizer.v1 YAML file

    Returns
    -------
    VectorizerV1
        Validated configuration; omitted sections take their defaults

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ValueError
        If validation fails (with the offending field in the message)
    """
    from . import fs

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Vectorizer config not found: {path}")

    data = fs.load_yaml(path) or {}
    try:
        return VectorizerV1(**data)
    except ValidationError as e:
        raise ValueError(f"Vectorizer config validation failed at {path}: {e}") from e


def load_paths_file(path: Union[str, Path]) -> PathsFileV1:
    """Load and validate a penpath.paths.v1 YAML file.

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ValueError
        If validation fails
    """
    from . import fs

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Paths file not found: {path}")

    data = fs.load_yaml(path)
    try:
        return PathsFileV1(**data)
    except ValidationError as e:
        raise ValueError(f"Paths file validation failed at {path}: {e}") from e
