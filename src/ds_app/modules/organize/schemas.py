# src/ds_app/modules/organize/schemas.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ds_app.core.config import Settings
from ds_app.core.errors import ErrorKind
from ds_app.core.paths import plain_folder_name


@dataclass(frozen=True)
class PhotoEntry:
    """Reference to one source file; content and mtime are fetched through storage on demand."""

    name: str
    handle: Any


class OrganizeOptions(BaseModel):
    copy_mode: bool = Field(
        False,
        description="Copy files into date folders. When false, originals are removed after a successful write (move).",
        example=False,
    )
    create_subfolder: bool = Field(
        False,
        description="Put the date folders under a fixed top-level subfolder instead of the source folder itself.",
        example=False,
    )
    subfolder_name: str = Field(
        "organized",
        description="Name of that top-level subfolder (only used when create_subfolder=true).",
        example="organized",
    )

    @field_validator("subfolder_name")
    @classmethod
    def _single_component(cls, name: str) -> str:
        return plain_folder_name(name)

    @classmethod
    def from_settings(cls, settings: Settings, **overrides: Any) -> OrganizeOptions:
        values = {
            "copy_mode": settings.COPY_MODE,
            "create_subfolder": settings.CREATE_SUBFOLDER,
            "subfolder_name": settings.SUBFOLDER_NAME,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


class TransferOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., example="IMG_0001.jpg")
    date_key: str = Field(..., example="2024-01-15")
    ok: bool = Field(..., example=True)
    error_kind: ErrorKind | None = Field(
        None, description="Set when ok=false, or for a degraded move (original kept)."
    )
    reason: str | None = Field(None, example="Permission denied")
    destination: str | None = Field(None, example="/photos/2024-01-15/IMG_0001.jpg")


class OrganizePlan(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: str = Field(..., example="/photos")
    groups: dict[str, list[str]] = Field(
        default_factory=dict,
        description="DateKey -> file names, in scan order.",
        example={"2024-01-15": ["IMG_0001.jpg", "IMG_0002.jpg"]},
    )

    @property
    def photo_count(self) -> int:
        return sum(len(v) for v in self.groups.values())


class OrganizeReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: str = Field(..., example="/photos")
    destination: str = Field(..., example="/photos")
    copy_mode: bool = Field(..., example=False)
    folder_count: int = Field(
        ..., ge=0, description="Distinct date keys processed.", example=2
    )
    folders_created: int = Field(
        ...,
        ge=0,
        description="Date folders that were created or reused successfully.",
        example=2,
    )
    success_count: int = Field(..., ge=0, example=3)
    error_count: int = Field(..., ge=0, example=0)
    warning_count: int = Field(
        0,
        ge=0,
        description="Moves where the original could not be deleted (file now in both places).",
        example=0,
    )
    outcomes: list[TransferOutcome] = Field(default_factory=list)
