"""Pack installer for copying packs out of the registry.

This module provides the PackInstaller class, which copies a pack's folder
into a consumer's directory. Installation is local only; packs are never
removed from the registry.

Files are copied into a hidden staging directory beside the target and moved
into place only once every copy succeeded, so a failed ``force`` reinstall
leaves the previous installation untouched.
"""

import logging
import shutil
import tempfile
from pathlib import Path

from packdex.errors import PackInstallError
from packdex.schema import METADATA_FILENAME, Pack

logger = logging.getLogger(__name__)


class PackInstaller:
    """Installer for packs.

    Attributes:
        dest_dir: Directory packs are installed into, one subdirectory per pack
    """

    def __init__(self, dest_dir: Path | str):
        self.dest_dir = Path(dest_dir)

    def target_for(self, pack: Pack) -> Path:
        """Return the directory a pack would be installed to."""
        return self.dest_dir / pack.name

    def install(self, pack: Pack, force: bool = False) -> Path:
        """Copy a pack's metadata and content document into the destination.

        Args:
            pack: Pack from the index
            force: Replace an existing installation of the same name

        Returns:
            Path to the installed pack directory

        Raises:
            PackInstallError: If the target exists (without force) or copying fails
        """
        target = self.target_for(pack)

        if target.exists() and not force:
            raise PackInstallError(
                pack_name=pack.name,
                destination=str(target),
                underlying_error="target already exists",
                suggestion="Use --force to replace the existing installation",
            )

        staging: Path | None = None
        try:
            self.dest_dir.mkdir(parents=True, exist_ok=True)
            staging = Path(tempfile.mkdtemp(prefix=f".{pack.name}-", dir=self.dest_dir))
            staging.chmod(0o755)

            shutil.copy2(pack.path / METADATA_FILENAME, staging / METADATA_FILENAME)
            if pack.content_path.is_file():
                shutil.copy2(pack.content_path, staging / pack.content_path.name)

            if target.exists():
                logger.info("Replacing existing installation at %s", target)
                _remove(target)
            staging.rename(target)
        except OSError as e:
            if staging is not None and staging.exists():
                shutil.rmtree(staging, ignore_errors=True)
            raise PackInstallError(
                pack_name=pack.name,
                destination=str(target),
                underlying_error=str(e),
            ) from e

        logger.info("Installed %s %s to %s", pack.name, pack.metadata.version, target)
        return target


def _remove(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()
