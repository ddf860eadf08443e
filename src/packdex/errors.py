"""
Exception hierarchy for packdex.

All packdex exceptions inherit from PackdexError, allowing callers to catch
all packdex-specific exceptions with a single except clause.

Exception Categories:
    - PackWarning: Per-pack problems collected during a scan (never raised by the scan)
    - RegistryError: The registry root itself cannot be scanned
    - PackError: Lookup and install failures for a single pack

Design Principles:
    - All errors have error codes for programmatic handling
    - All errors include context (pack name, path where applicable)
    - Errors are designed to be both human-readable and machine-parseable
"""

from dataclasses import dataclass, field
from typing import Any


# =============================================================================
# Error Codes
# =============================================================================

# Scan warnings: 1xxx
ERROR_INVALID_METADATA = 1001
ERROR_DUPLICATE_NAME = 1002

# Registry errors: 2xxx
ERROR_REGISTRY_ROOT = 2001

# Pack errors: 3xxx
ERROR_PACK_NOT_FOUND = 3001
ERROR_PACK_INSTALL = 3002

# Warning kinds
KIND_INVALID_METADATA = "InvalidMetadata"
KIND_DUPLICATE_NAME = "DuplicateName"


# =============================================================================
# Base Exception
# =============================================================================


@dataclass
class PackdexError(Exception):
    """
    Base exception for all packdex errors.

    Attributes:
        message: Human-readable error description
        code: Numeric error code for programmatic handling
        suggestion: Optional hint for how to resolve the error
        context: Optional dict with additional debugging info
    """

    message: str = ""
    code: int = 0
    suggestion: str | None = None
    context: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        """Format error for display."""
        parts = [f"[E{self.code}] {self.message}"]
        if self.suggestion:
            parts.append(f"\nSuggestion: {self.suggestion}")
        return "".join(parts)

    def __repr__(self) -> str:
        """Format error for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code}, "
            f"context={self.context!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "suggestion": self.suggestion,
            "context": self.context,
        }


# =============================================================================
# Scan Warnings
# =============================================================================


@dataclass
class PackWarning(PackdexError):
    """
    Base class for per-pack scan warnings.

    The index builder collects these instead of raising them, so one bad
    pack never hides the others.

    Attributes:
        pack_path: Directory of the offending pack
    """

    pack_path: str = ""

    kind = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        self.context["pack_path"] = self.pack_path

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, including the warning kind."""
        data = super().to_dict()
        data["kind"] = self.kind
        return data


@dataclass
class InvalidMetadataError(PackWarning):
    """Raised (or collected) when a pack's metadata is missing or malformed."""

    validation_error: str = ""

    kind = KIND_INVALID_METADATA

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Invalid metadata in {self.pack_path}: {self.validation_error}"
        if self.code == 0:
            self.code = ERROR_INVALID_METADATA
        super().__post_init__()
        self.context["validation_error"] = self.validation_error


@dataclass
class DuplicateNameError(PackWarning):
    """Collected when a second pack claims a name already in the index."""

    pack_name: str = ""
    kept_path: str = ""

    kind = KIND_DUPLICATE_NAME

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = (
                f"Duplicate pack name '{self.pack_name}' in {self.pack_path}; "
                f"keeping {self.kept_path}"
            )
        if self.code == 0:
            self.code = ERROR_DUPLICATE_NAME
        if not self.suggestion:
            self.suggestion = "Rename one of the packs so every name is unique"
        super().__post_init__()
        self.context.update({
            "pack_name": self.pack_name,
            "kept_path": self.kept_path,
        })


# =============================================================================
# Registry Errors
# =============================================================================


@dataclass
class RegistryRootError(PackdexError):
    """Raised when the registry root cannot be scanned at all."""

    root: str = ""
    underlying_error: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            detail = f": {self.underlying_error}" if self.underlying_error else ""
            self.message = f"Cannot read registry root {self.root}{detail}"
        if self.code == 0:
            self.code = ERROR_REGISTRY_ROOT
        if not self.suggestion:
            self.suggestion = "Pass --root or set PACKDEX_ROOT to a directory containing skills/, contexts/ or prompts/"
        self.context.update({
            "root": self.root,
            "underlying_error": self.underlying_error,
        })


# =============================================================================
# Pack Errors
# =============================================================================


@dataclass
class PackError(PackdexError):
    """
    Base class for single-pack errors.

    Attributes:
        pack_name: Name of the pack involved
    """

    pack_name: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        self.context["pack_name"] = self.pack_name


@dataclass
class PackNotFoundError(PackError):
    """Raised when a pack name is not in the index."""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Pack not found: {self.pack_name}"
        if self.code == 0:
            self.code = ERROR_PACK_NOT_FOUND
        if not self.suggestion:
            self.suggestion = "Use `packdex list` or `packdex search` to see available packs"
        super().__post_init__()


@dataclass
class PackInstallError(PackError):
    """Raised when a pack cannot be copied to its destination."""

    destination: str = ""
    underlying_error: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Cannot install {self.pack_name} to {self.destination}: {self.underlying_error}"
        if self.code == 0:
            self.code = ERROR_PACK_INSTALL
        super().__post_init__()
        self.context.update({
            "destination": self.destination,
            "underlying_error": self.underlying_error,
        })
