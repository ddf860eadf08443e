"""
Pack loader for loading and validating a single pack directory.

This module provides the PackLoader class for:
- Loading and validating pack.yaml
- Reading the instructional document named by the pack type
- Checking that a pack folder follows the layout conventions

Design Decisions:
    - Any metadata problem surfaces as InvalidMetadataError
    - A missing content document is a structural problem, not a metadata one
    - The category is taken from the parent directory name
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from packdex.errors import InvalidMetadataError
from packdex.schema import (
    METADATA_FILENAME,
    Pack,
    PackMetadata,
    load_metadata,
    type_for_category,
)

logger = logging.getLogger(__name__)


class PackLoader:
    """
    Loads and validates one pack directory.

    Attributes:
        pack_path: Absolute path to the pack directory
        category: Category directory name (defaults to the parent's name)

    Example:
        >>> loader = PackLoader("registry/skills/commit-message")
        >>> pack = loader.load()
        >>> pack.metadata.version
        '1.0.0'
    """

    def __init__(self, pack_path: Path | str, category: str | None = None) -> None:
        self.pack_path = Path(pack_path).resolve()
        self.category = category if category is not None else self.pack_path.parent.name
        self._metadata: PackMetadata | None = None

    @property
    def metadata_path(self) -> Path:
        return self.pack_path / METADATA_FILENAME

    @property
    def metadata(self) -> PackMetadata:
        """
        Get the loaded metadata, loading it on first access.

        Raises:
            InvalidMetadataError: If metadata is missing or invalid
        """
        if self._metadata is None:
            self._metadata = self.load_metadata()
        return self._metadata

    def load_metadata(self) -> PackMetadata:
        """
        Load and validate pack.yaml.

        Raises:
            InvalidMetadataError: If the file is missing, unreadable, not YAML,
                or fails schema validation
        """
        try:
            if not self.metadata_path.is_file():
                raise self._invalid(f"{METADATA_FILENAME} not found")
            return load_metadata(self.metadata_path)
        except yaml.YAMLError as e:
            raise self._invalid(f"Invalid YAML: {e}") from e
        except UnicodeDecodeError as e:
            raise self._invalid(f"Not valid UTF-8: {e}") from e
        except OSError as e:
            raise self._invalid(f"Cannot read {METADATA_FILENAME}: {e}") from e
        except ValueError as e:
            # pydantic.ValidationError is a ValueError subclass
            raise self._invalid(str(e)) from e

    def load_content(self) -> str:
        """
        Read the instructional document for this pack's type.

        Returns:
            The document text, or "" if the document does not exist
        """
        content_path = self.pack_path / self.metadata.type.content_filename
        if not content_path.is_file():
            logger.debug("No %s in %s", content_path.name, self.pack_path)
            return ""
        return content_path.read_text(encoding="utf-8")

    def load(self) -> Pack:
        """
        Load the pack: metadata, category check and content.

        Raises:
            InvalidMetadataError: If metadata is invalid, its type does not
                belong to the category directory, or the content is unreadable
        """
        metadata = self.metadata

        expected = type_for_category(self.category)
        if expected is not None and metadata.type is not expected:
            raise self._invalid(
                f"type '{metadata.type.value}' does not belong in {self.category}/ "
                f"(expected '{expected.value}')"
            )

        try:
            content = self.load_content()
        except (OSError, UnicodeDecodeError) as e:
            raise self._invalid(f"Cannot read {metadata.type.content_filename}: {e}") from e

        return Pack(
            metadata=metadata,
            content=content,
            path=self.pack_path,
            category=self.category,
        )

    def validate_structure(self) -> list[str]:
        """
        Validate pack structure, return list of errors.

        Checks:
        - pack.yaml exists and is valid
        - type matches the category directory
        - directory name matches the pack name
        - the content document for the type exists

        Returns:
            List of error messages (empty if valid)
        """
        errors = []

        try:
            metadata = self.load_metadata()
        except InvalidMetadataError as e:
            errors.append(e.validation_error)
            return errors  # Can't continue without metadata

        expected = type_for_category(self.category)
        if expected is not None and metadata.type is not expected:
            errors.append(
                f"type '{metadata.type.value}' does not belong in {self.category}/ "
                f"(expected '{expected.value}')"
            )

        if self.pack_path.name != metadata.name:
            errors.append(
                f"Directory name '{self.pack_path.name}' does not match pack name '{metadata.name}'"
            )

        content_filename = metadata.type.content_filename
        if not (self.pack_path / content_filename).is_file():
            errors.append(f"Content document not found: {content_filename}")

        return errors

    def _invalid(self, validation_error: str) -> InvalidMetadataError:
        return InvalidMetadataError(
            pack_path=str(self.pack_path),
            validation_error=validation_error,
        )
