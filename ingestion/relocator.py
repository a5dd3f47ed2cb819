"""
Archive relocation for processed source files.
"""
from pathlib import Path
import errno
import logging
import os
import shutil
import tempfile

from domain.errors import RelocationError

logger = logging.getLogger(__name__)


class FileRelocator:
    """
    Moves a processed file into the archive directory.

    Uses a rename so the destination never holds a half-written file. When
    source and destination live on different filesystems the file is copied
    to a temporary name next to the destination and renamed into place.
    """

    def relocate(self, source_path: Path | str, destination_path: Path | str) -> Path:
        """
        Move source_path to destination_path, creating the parent directory.

        Returns:
            The final destination path

        Raises:
            RelocationError: If the move cannot complete
        """
        source = Path(source_path)
        destination = Path(destination_path)

        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise RelocationError(
                f"Cannot create destination directory {destination.parent}: {e}",
                file_name=source.name,
                step="archiving",
            ) from e

        try:
            os.replace(source, destination)
        except OSError as e:
            if e.errno != errno.EXDEV:
                raise RelocationError(
                    f"Cannot move {source} -> {destination}: {e}",
                    file_name=source.name,
                    step="archiving",
                ) from e
            self._move_across_devices(source, destination)

        logger.debug(f"Moved {source} -> {destination}")
        return destination

    def _move_across_devices(self, source: Path, destination: Path) -> None:
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=destination.parent, prefix=f".{destination.name}.", suffix=".part"
            )
            os.close(fd)
            shutil.copy2(source, tmp_name)
            os.replace(tmp_name, destination)
            tmp_name = None
            source.unlink()
        except OSError as e:
            raise RelocationError(
                f"Cannot move {source} -> {destination} across devices: {e}",
                file_name=source.name,
                step="archiving",
            ) from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
