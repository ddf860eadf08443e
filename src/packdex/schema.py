"""
Schema definitions for packdex.

This module defines the Pydantic models and file conventions for packs:
- PackType: skill, context or prompt
- PackMetadata: the validated contents of pack.yaml
- Pack: metadata plus the instructional document and its location
- PackSummary: the content-free view returned by search

Design Decisions:
    - Metadata uses strict validation (extra="forbid", every field required)
    - All models are frozen; the index is never mutated after a scan
    - Tags are a set semantically but keep their file order for display
"""

import re
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# File Conventions
# =============================================================================

METADATA_FILENAME = "pack.yaml"

NAME_PATTERN = re.compile(r"[a-z][a-z0-9_-]*")
VERSION_PATTERN = re.compile(r"\d+\.\d+\.\d+(-[a-zA-Z0-9.]+)?")


class PackType(str, Enum):
    """The kind of instructional content a pack carries."""

    SKILL = "skill"
    CONTEXT = "context"
    PROMPT = "prompt"

    @property
    def category_dir(self) -> str:
        """Category directory packs of this type live in."""
        return CATEGORY_DIRS[self]

    @property
    def content_filename(self) -> str:
        """Name of the instructional document paired with the metadata."""
        return CONTENT_FILENAMES[self]


# Scan order matters: the first pack found under a name wins.
CATEGORY_DIRS: dict[PackType, str] = {
    PackType.SKILL: "skills",
    PackType.CONTEXT: "contexts",
    PackType.PROMPT: "prompts",
}

CONTENT_FILENAMES: dict[PackType, str] = {
    PackType.SKILL: "instructions.md",
    PackType.CONTEXT: "context.md",
    PackType.PROMPT: "prompt.md",
}


def type_for_category(category: str) -> PackType | None:
    """Return the pack type stored under a category directory name."""
    for pack_type, dirname in CATEGORY_DIRS.items():
        if dirname == category:
            return pack_type
    return None


# =============================================================================
# Metadata
# =============================================================================


class PackMetadata(BaseModel):
    """
    Validated contents of a pack's pack.yaml.

    Attributes:
        name: Unique pack identifier (lowercase alphanumeric with hyphens/underscores)
        version: Semantic version string (e.g., "1.0.0")
        type: skill, context or prompt
        description: Human-readable description of the pack
        author: Pack author name or handle
        tags: Search tags, duplicates removed
        license: License identifier (e.g., "MIT")
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(
        ...,
        description="Unique pack identifier",
        min_length=1,
        max_length=64,
    )
    version: str = Field(
        ...,
        description="Semantic version string",
    )
    type: PackType = Field(
        ...,
        description="Pack type: skill, context or prompt",
    )
    description: str = Field(
        ...,
        description="Human-readable description",
    )
    author: str = Field(
        ...,
        description="Pack author name or handle",
    )
    tags: tuple[str, ...] = Field(
        ...,
        description="Tags used for search",
    )
    license: str = Field(
        ...,
        description="License identifier",
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate pack name format (lowercase alphanumeric with hyphens/underscores)."""
        if not NAME_PATTERN.fullmatch(v):
            msg = (
                f"Invalid pack name: {v}. "
                "Must start with lowercase letter, contain only lowercase letters, "
                "numbers, hyphens, and underscores."
            )
            raise ValueError(msg)
        return v

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: str) -> str:
        """Validate semantic version format."""
        if not VERSION_PATTERN.fullmatch(v):
            msg = f"Invalid version format: {v}. Expected semver (e.g., '1.0.0')"
            raise ValueError(msg)
        return v

    @field_validator("tags", mode="before")
    @classmethod
    def validate_tags(cls, v: Any) -> Any:
        """Require a list of strings and drop repeated tags."""
        if not isinstance(v, list):
            msg = f"tags must be a list, got {type(v).__name__}"
            raise ValueError(msg)
        seen: list[str] = []
        for tag in v:
            if not isinstance(tag, str):
                msg = f"tags must be strings, got {type(tag).__name__}"
                raise ValueError(msg)
            if tag not in seen:
                seen.append(tag)
        return tuple(seen)


def load_metadata(path: Path | str) -> PackMetadata:
    """
    Load and validate a metadata file.

    Raises:
        OSError: If the file cannot be read
        UnicodeDecodeError: If the file is not UTF-8
        yaml.YAMLError: If the file is not valid YAML
        ValueError: If the document is empty or fails validation
    """
    path = Path(path)
    with path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return _validate_metadata(data)


def load_metadata_from_string(content: str) -> PackMetadata:
    """Load metadata from a YAML string."""
    data = yaml.safe_load(content)
    return _validate_metadata(data)


def _validate_metadata(data: Any) -> PackMetadata:
    if data is None:
        raise ValueError("Empty metadata file")
    if not isinstance(data, dict):
        raise ValueError(f"Metadata must be a mapping, got {type(data).__name__}")
    return PackMetadata.model_validate(data)


# =============================================================================
# Pack Records
# =============================================================================


class PackSummary(BaseModel):
    """Content-free view of a pack, as returned by search."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str
    type: PackType
    description: str
    author: str
    tags: tuple[str, ...]
    license: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dict."""
        return self.model_dump(mode="json")


class Pack(BaseModel):
    """
    A parsed pack held in the index.

    Attributes:
        metadata: Validated pack.yaml contents
        content: Body of the instructional document ("" if missing)
        path: Directory the pack was loaded from
        category: Category directory name the pack sits under
    """

    model_config = ConfigDict(frozen=True)

    metadata: PackMetadata
    content: str = ""
    path: Path
    category: str

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def content_path(self) -> Path:
        return self.path / self.metadata.type.content_filename

    def summary(self) -> PackSummary:
        """Return the content-free summary of this pack."""
        return PackSummary(**self.metadata.model_dump())
