"""
Pack index builder.

Scans a registry root into an in-memory PackIndex:

    root/
        skills/<name>/pack.yaml + instructions.md
        contexts/<name>/pack.yaml + context.md
        prompts/<name>/pack.yaml + prompt.md

Design Decisions:
    - Per-pack problems are collected as warnings and never stop the scan
    - Duplicate names: first found wins, in category order then directory name order
    - Only the root itself failing to list is fatal; an unreadable category
      directory or pack directory becomes an InvalidMetadata warning
    - The index is rebuilt on every call; nothing is cached or persisted
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from packdex.errors import (
    DuplicateNameError,
    InvalidMetadataError,
    PackNotFoundError,
    PackWarning,
    RegistryRootError,
)
from packdex.pack.loader import PackLoader
from packdex.schema import CATEGORY_DIRS, Pack, PackSummary

logger = logging.getLogger(__name__)


@dataclass
class PackIndex:
    """
    In-memory mapping from pack name to Pack, plus the scan's warnings.

    Attributes:
        root: Registry root the index was built from
        packs: Pack records keyed by name
        warnings: InvalidMetadata and DuplicateName warnings, in scan order
    """

    root: Path
    packs: dict[str, Pack] = field(default_factory=dict)
    warnings: list[PackWarning] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.packs)

    def __contains__(self, name: object) -> bool:
        return name in self.packs

    def get(self, name: str) -> Pack:
        """
        Look up a pack by exact name.

        Raises:
            PackNotFoundError: If no pack has this name
        """
        try:
            return self.packs[name]
        except KeyError:
            raise PackNotFoundError(pack_name=name) from None

    def names(self) -> list[str]:
        """All pack names, ascending."""
        return sorted(self.packs)

    def sorted_packs(self) -> list[Pack]:
        """All packs ordered by name."""
        return [self.packs[name] for name in self.names()]

    def summaries(self) -> list[PackSummary]:
        """Summaries of all packs ordered by name."""
        return [pack.summary() for pack in self.sorted_packs()]


def _list_dir(path: Path) -> list[Path]:
    return sorted(path.iterdir(), key=lambda p: p.name)


def _skip(index: PackIndex, path: Path, validation_error: str) -> None:
    logger.warning("Skipping %s: %s", path, validation_error)
    index.warnings.append(
        InvalidMetadataError(pack_path=str(path), validation_error=validation_error)
    )


def build_index(root: Path | str) -> PackIndex:
    """
    Scan a registry root and build its PackIndex.

    Args:
        root: Directory containing the category directories

    Returns:
        PackIndex with every valid pack and the collected warnings

    Raises:
        RegistryRootError: If the root is missing, not a directory, or unreadable
    """
    root = Path(root)

    try:
        if not root.exists():
            raise RegistryRootError(root=str(root), underlying_error="directory does not exist")
        if not root.is_dir():
            raise RegistryRootError(root=str(root), underlying_error="not a directory")
        _list_dir(root)
        category_dirs = [(category, root / category) for category in CATEGORY_DIRS.values()]
        present = {category for category, path in category_dirs if path.is_dir()}
    except OSError as e:
        raise RegistryRootError(root=str(root), underlying_error=str(e)) from e

    index = PackIndex(root=root.resolve())

    for category, category_dir in category_dirs:
        if category not in present:
            logger.debug("No %s/ directory under %s", category, root)
            continue

        try:
            entries = _list_dir(category_dir)
        except OSError as e:
            _skip(index, category_dir, f"Cannot list {category}/: {e}")
            continue

        for entry in entries:
            if entry.name.startswith("."):
                continue
            try:
                is_pack_dir = entry.is_dir()
            except OSError as e:
                _skip(index, entry, f"Cannot read pack directory: {e}")
                continue
            if is_pack_dir:
                _add_pack(index, PackLoader(entry, category=category))

    logger.debug(
        "Indexed %d pack(s) from %s with %d warning(s)",
        len(index.packs),
        index.root,
        len(index.warnings),
    )
    return index


def _add_pack(index: PackIndex, loader: PackLoader) -> None:
    try:
        pack = loader.load()
    except InvalidMetadataError as warning:
        logger.warning("Skipping %s: %s", loader.pack_path, warning.validation_error)
        index.warnings.append(warning)
        return

    kept = index.packs.get(pack.name)
    if kept is not None:
        warning = DuplicateNameError(
            pack_path=str(pack.path),
            pack_name=pack.name,
            kept_path=str(kept.path),
        )
        logger.warning("%s", warning.message)
        index.warnings.append(warning)
        return

    index.packs[pack.name] = pack
