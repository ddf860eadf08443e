"""
Pytest configuration and fixtures for packdex tests.

This module provides shared fixtures used across unit and integration tests.
"""

import tempfile
from pathlib import Path
from typing import Any, Callable, Generator

import pytest
import yaml

from packdex.schema import CATEGORY_DIRS, PackType

MakePack = Callable[..., Path]


def metadata_for(name: str, pack_type: str = "skill", **overrides: Any) -> dict[str, Any]:
    """Return a complete metadata dict, with any field overridden."""
    data: dict[str, Any] = {
        "name": name,
        "version": "1.0.0",
        "type": pack_type,
        "description": f"The {name} pack",
        "author": "tester",
        "tags": [],
        "license": "MIT",
    }
    data.update(overrides)
    return data


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def registry_root(temp_dir: Path) -> Path:
    """An empty registry root."""
    root = temp_dir / "registry"
    root.mkdir()
    return root


@pytest.fixture
def make_pack(registry_root: Path) -> MakePack:
    """
    Factory writing one pack folder under the registry root.

    Keyword arguments:
        pack_type: skill, context or prompt (picks the category directory)
        dirname: folder name, defaults to the pack name
        category: category directory, defaults to the one for pack_type
        metadata: dict written as pack.yaml (defaults to metadata_for(...))
        raw: literal pack.yaml text, overriding metadata
        content: body of the content document, None to omit it
        fields: overrides passed to metadata_for
    """

    def _make(
        name: str,
        pack_type: str = "skill",
        *,
        dirname: str | None = None,
        category: str | None = None,
        metadata: dict[str, Any] | None = None,
        raw: str | None = None,
        content: str | None = "# Instructions\n",
        **fields: Any,
    ) -> Path:
        kind = PackType(pack_type)
        pack_dir = registry_root / (category or CATEGORY_DIRS[kind]) / (dirname or name)
        pack_dir.mkdir(parents=True)

        if raw is not None:
            (pack_dir / "pack.yaml").write_text(raw)
        else:
            data = metadata if metadata is not None else metadata_for(name, pack_type, **fields)
            (pack_dir / "pack.yaml").write_text(yaml.safe_dump(data, sort_keys=False))

        if content is not None:
            (pack_dir / kind.content_filename).write_text(content)
        return pack_dir

    return _make


@pytest.fixture
def git_registry(registry_root: Path, make_pack: MakePack) -> Path:
    """Registry with two git-related packs and one unrelated context."""
    make_pack(
        "pr-description",
        "prompt",
        description="Draft a pull request description",
        tags=["git", "pr"],
        content="Describe the change.\n",
    )
    make_pack(
        "commit-message",
        "skill",
        description="Write conventional commit messages",
        tags=["git", "commits"],
        content="# Commit messages\n\nUse the imperative mood.\n",
    )
    make_pack(
        "python-style",
        "context",
        description="House style for Python code",
        tags=["python", "style"],
        content="Prefer pathlib.\n",
    )
    return registry_root
