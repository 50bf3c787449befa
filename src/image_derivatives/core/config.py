"""Declarative configuration of the derived images to produce."""

import json
from pathlib import Path
from typing import Any, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ConfigurationError
from .image_utils import FORMAT_ALIASES, ImageFormat


class ReduceOptions(BaseModel):
    """Recompress the source in place or into another bucket/directory."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    bucket: Optional[str] = None
    directory: Optional[str] = None
    quality: Optional[int] = Field(default=None, ge=1, le=100, strict=True)


class BackupOptions(BaseModel):
    """Copy the source unmodified next to itself under a decorated name."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    prefix: str = ""
    suffix: str = ""


class ResizeOptions(BaseModel):
    """One resized output."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    size: int = Field(gt=0, strict=True)
    quality: Optional[int] = Field(default=None, ge=1, le=100, strict=True)
    format: Optional[ImageFormat] = None
    change_extension: bool = Field(default=False, alias="changeExtension")

    @field_validator("format", mode="before")
    @classmethod
    def normalize_format(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip().lower()
            return FORMAT_ALIASES.get(value, value)
        return value


class Config(BaseModel):
    """
    Validated, immutable set of operation groups.

    Only ``reduce``, ``backup`` and ``resizes`` are recognized; any other key
    is ignored. A group that is absent (or null) produces no output.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    reduce: Optional[ReduceOptions] = None
    backup: Optional[BackupOptions] = None
    resizes: Tuple[ResizeOptions, ...] = ()

    @field_validator("resizes", mode="before")
    @classmethod
    def null_resizes(cls, value: Any) -> Any:
        return () if value is None else value

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Config":
        """Validate parsed configuration data, e.g. loaded JSON."""
        if not isinstance(data, Mapping):
            raise ConfigurationError(
                f"Configuration must be a mapping, got {type(data).__name__}"
            )
        try:
            return cls.model_validate(dict(data))
        except ValidationError as exc:
            location, message = describe_validation_error(exc)
            raise ConfigurationError(
                f"Invalid configuration at {location}: {message}", location=location
            ) from exc

    @property
    def is_empty(self) -> bool:
        return self.reduce is None and self.backup is None and not self.resizes

    def operations(self) -> List[Any]:
        """Expand into the ordered operation list."""
        from .operations import expand_operations

        return expand_operations(self)


def format_location(loc: Tuple[Union[int, str], ...]) -> str:
    """Render a pydantic error location as ``resizes[1].size``."""
    rendered = ""
    for part in loc:
        if isinstance(part, int):
            rendered += f"[{part}]"
        else:
            rendered += f".{part}" if rendered else str(part)
    return rendered or "<root>"


def describe_validation_error(exc: ValidationError) -> Tuple[str, str]:
    first = exc.errors()[0]
    return format_location(tuple(first["loc"])), first["msg"]


def load_config(path: Union[str, Path]) -> Config:
    """Read and validate a JSON configuration file."""
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = json.load(handle)
    except OSError as exc:
        raise ConfigurationError(f"Cannot read configuration file {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Configuration file {path} is not valid JSON: {exc}") from exc
    return Config.from_mapping(data)
