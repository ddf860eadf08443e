"""
Unit tests for schema models.

Tests cover:
- PackType conventions (category directory and content filename)
- PackMetadata validation of every field
- Loading metadata from files and strings
- Pack and PackSummary records
"""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from packdex.schema import (
    Pack,
    PackMetadata,
    PackSummary,
    PackType,
    load_metadata,
    load_metadata_from_string,
    type_for_category,
)


def _metadata(**overrides: object) -> dict:
    data = {
        "name": "commit-message",
        "version": "1.0.0",
        "type": "skill",
        "description": "Write commit messages",
        "author": "octocat",
        "tags": ["git", "commits"],
        "license": "MIT",
    }
    data.update(overrides)
    return data


class TestPackType:
    """Tests for PackType conventions."""

    def test_category_dirs(self) -> None:
        """Each type maps to its plural category directory."""
        assert PackType.SKILL.category_dir == "skills"
        assert PackType.CONTEXT.category_dir == "contexts"
        assert PackType.PROMPT.category_dir == "prompts"

    def test_content_filenames(self) -> None:
        """Each type pairs with its own document."""
        assert PackType.SKILL.content_filename == "instructions.md"
        assert PackType.CONTEXT.content_filename == "context.md"
        assert PackType.PROMPT.content_filename == "prompt.md"

    def test_type_for_category(self) -> None:
        """Category names map back to types."""
        assert type_for_category("skills") is PackType.SKILL
        assert type_for_category("prompts") is PackType.PROMPT
        assert type_for_category("other") is None


class TestPackMetadata:
    """Tests for PackMetadata validation."""

    def test_valid_metadata(self) -> None:
        """Complete metadata validates."""
        meta = PackMetadata.model_validate(_metadata())
        assert meta.name == "commit-message"
        assert meta.type is PackType.SKILL
        assert meta.tags == ("git", "commits")

    @pytest.mark.parametrize(
        "field", ["name", "version", "type", "description", "author", "tags", "license"]
    )
    def test_every_field_required(self, field: str) -> None:
        """Each of the seven fields is required."""
        data = _metadata()
        del data[field]
        with pytest.raises(ValidationError):
            PackMetadata.model_validate(data)

    def test_unknown_field_rejected(self) -> None:
        """Extra keys are not allowed."""
        with pytest.raises(ValidationError):
            PackMetadata.model_validate(_metadata(homepage="https://example.com"))

    def test_invalid_name(self) -> None:
        """Names must be lowercase identifiers."""
        with pytest.raises(ValidationError, match="Invalid pack name"):
            PackMetadata.model_validate(_metadata(name="Commit Message"))

    def test_invalid_version(self) -> None:
        """Versions must be semver."""
        with pytest.raises(ValidationError, match="Invalid version format"):
            PackMetadata.model_validate(_metadata(version="1.0"))

    def test_prerelease_version(self) -> None:
        """Pre-release suffixes are accepted."""
        meta = PackMetadata.model_validate(_metadata(version="2.0.0-beta.1"))
        assert meta.version == "2.0.0-beta.1"

    def test_numeric_version_rejected(self) -> None:
        """An unquoted YAML float is not a version string."""
        with pytest.raises(ValidationError):
            PackMetadata.model_validate(_metadata(version=1.0))

    def test_unknown_type(self) -> None:
        """Type must be skill, context or prompt."""
        with pytest.raises(ValidationError):
            PackMetadata.model_validate(_metadata(type="recipe"))

    def test_tags_must_be_list(self) -> None:
        """A bare string is not a tag list."""
        with pytest.raises(ValidationError, match="tags must be a list"):
            PackMetadata.model_validate(_metadata(tags="git"))

    def test_tags_must_be_strings(self) -> None:
        """Tags must be strings."""
        with pytest.raises(ValidationError, match="tags must be strings"):
            PackMetadata.model_validate(_metadata(tags=["git", 3]))

    def test_duplicate_tags_collapsed(self) -> None:
        """Repeated tags are dropped, first occurrence kept."""
        meta = PackMetadata.model_validate(_metadata(tags=["git", "pr", "git"]))
        assert meta.tags == ("git", "pr")

    def test_description_must_be_string(self) -> None:
        """Numbers are not coerced to strings."""
        with pytest.raises(ValidationError):
            PackMetadata.model_validate(_metadata(description=42))

    def test_frozen(self) -> None:
        """Metadata cannot be modified."""
        meta = PackMetadata.model_validate(_metadata())
        with pytest.raises(ValidationError):
            meta.name = "other"  # type: ignore[misc]


class TestLoadMetadata:
    """Tests for metadata loading helpers."""

    def test_load_from_file(self, temp_dir: Path) -> None:
        """Load metadata from a YAML file."""
        path = temp_dir / "pack.yaml"
        path.write_text(yaml.safe_dump(_metadata()))
        assert load_metadata(path).name == "commit-message"

    def test_load_from_string(self) -> None:
        """Load metadata from a YAML string."""
        meta = load_metadata_from_string(yaml.safe_dump(_metadata(type="prompt")))
        assert meta.type is PackType.PROMPT

    def test_empty_document(self) -> None:
        """An empty document is rejected."""
        with pytest.raises(ValueError, match="Empty metadata file"):
            load_metadata_from_string("")

    def test_non_mapping_document(self) -> None:
        """A list document is rejected."""
        with pytest.raises(ValueError, match="must be a mapping"):
            load_metadata_from_string("- a\n- b\n")

    def test_invalid_yaml(self) -> None:
        """Broken YAML raises a YAML error."""
        with pytest.raises(yaml.YAMLError):
            load_metadata_from_string("name: [unclosed\n")


class TestPackRecords:
    """Tests for Pack and PackSummary."""

    def test_pack_properties(self, temp_dir: Path) -> None:
        """Pack exposes name and content path."""
        meta = PackMetadata.model_validate(_metadata())
        pack = Pack(metadata=meta, content="body", path=temp_dir, category="skills")
        assert pack.name == "commit-message"
        assert pack.content_path == temp_dir / "instructions.md"

    def test_summary_drops_content(self, temp_dir: Path) -> None:
        """Summaries carry metadata only."""
        meta = PackMetadata.model_validate(_metadata())
        pack = Pack(metadata=meta, content="body", path=temp_dir, category="skills")
        summary = pack.summary()
        assert isinstance(summary, PackSummary)
        assert summary.name == "commit-message"
        assert not hasattr(summary, "content")

    def test_summary_to_dict(self, temp_dir: Path) -> None:
        """to_dict is JSON friendly."""
        meta = PackMetadata.model_validate(_metadata())
        pack = Pack(metadata=meta, path=temp_dir, category="skills")
        data = pack.summary().to_dict()
        assert data["type"] == "skill"
        assert data["tags"] == ["git", "commits"]
        assert set(data) == {"name", "version", "type", "description", "author", "tags", "license"}
