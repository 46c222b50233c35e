import logging
import os
import random
import time
from pathlib import Path
from typing import BinaryIO, Optional

from app.core.config import settings
from app.core.exceptions import NotFoundError, StorageIOError, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = ('.pdf', '.epub', '.txt', '.doc', '.docx', '.jpg', '.jpeg', '.png')
CHUNK_SIZE = 1024 * 1024


def split_file_name(file_name: str) -> tuple[str, str]:
    """
    Split a client supplied name into (base, extension).

    Directory components are dropped; the extension keeps its case.
    """
    name = (file_name or "").replace("\\", "/").rsplit("/", 1)[-1]
    return os.path.splitext(name)


def generate_file_name(original_name: str) -> str:
    """
    Build a storage name of the form ``<base>-<millis>-<random><ext>``.

    Time plus a random draw keeps collisions negligible. Not a security
    boundary: names are guessable.
    """
    base_name, extension = split_file_name(original_name)
    unique_suffix = f"{int(time.time() * 1000)}-{random.randint(0, 1_000_000_000)}"
    return f"{base_name}-{unique_suffix}{extension}"


class LocalStorageService:
    def __init__(
        self,
        upload_dir: Optional[str] = None,
        url_prefix: Optional[str] = None,
        max_size: Optional[int] = None
    ):
        self.upload_dir = Path(upload_dir or settings.UPLOAD_DIR)
        self.url_prefix = url_prefix or settings.UPLOAD_URL_PREFIX
        self.max_size = max_size if max_size is not None else settings.MAX_UPLOAD_SIZE

    def ensure_directory(self) -> Path:
        """Create the upload directory (and parents) if it doesn't exist"""
        try:
            self.upload_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageIOError(f"Cannot create upload directory: {e}") from e
        return self.upload_dir

    def validate_file(self, file_name: str, file_size: Optional[int] = None) -> tuple[bool, str]:
        """
        Validate file for upload

        Args:
            file_name: Name of the file as supplied by the client
            file_size: Declared size in bytes, if known

        Returns:
            Tuple of (is_valid, error_message)
        """
        if not file_name:
            return False, "No file selected or file type not allowed"

        if "\x00" in file_name:
            return False, "Invalid file name."

        # Check file extension
        file_extension = split_file_name(file_name)[1].lower()
        if file_extension not in ALLOWED_EXTENSIONS:
            shown = file_extension or "(none)"
            return False, (
                f"File type {shown} not allowed. "
                "Please upload PDF, EPUB, TXT, DOC, DOCX, or image files."
            )

        if file_size is not None and file_size > self.max_size:
            return False, f"File size too large. Maximum size: {self.max_size // (1024 * 1024)}MB"

        return True, ""

    def resolve_path(self, file_name: str) -> Optional[Path]:
        """
        Map a stored name to its path in the upload directory.

        Returns None for names that would leave the directory.
        """
        if not file_name or file_name in (".", ".."):
            return None
        if "/" in file_name or "\\" in file_name or "\x00" in file_name:
            return None
        return self.upload_dir / file_name

    def get_public_url(self, file_name: str) -> str:
        """Public-relative path for a stored file"""
        return f"{self.url_prefix.rstrip('/')}/{file_name}"

    def exists(self, file_name: str) -> bool:
        path = self.resolve_path(file_name)
        return path is not None and path.is_file()

    def save_file(self, file: BinaryIO, original_name: str) -> dict:
        """
        Stream an upload into the upload directory.

        Args:
            file: Readable binary file object
            original_name: Client supplied filename

        Returns:
            Dict with file_name, file_path and file_size

        Raises:
            ValidationError: the payload is larger than max_size
            StorageIOError: the write failed
        """
        self.ensure_directory()
        file_name = generate_file_name(original_name)
        path = self.upload_dir / file_name

        written = 0
        try:
            with open(path, "xb") as out:
                while True:
                    chunk = file.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > self.max_size:
                        raise ValidationError(
                            f"File size too large. Maximum size: {self.max_size // (1024 * 1024)}MB"
                        )
                    out.write(chunk)
        except ValidationError:
            self._discard(path)
            raise
        except (OSError, ValueError) as e:
            self._discard(path)
            logger.error(f"Error writing upload {file_name}: {e}")
            raise StorageIOError("Error uploading book. Please try again.") from e

        logger.info(f"Stored upload {original_name} as {file_name} ({written} bytes)")
        return {
            "file_name": file_name,
            "file_path": self.get_public_url(file_name),
            "file_size": written
        }

    def delete_file(self, file_name: str) -> bool:
        """
        Delete a stored file

        Returns:
            True if a file was removed, False if it was already absent
        """
        path = self.resolve_path(file_name)
        if path is None:
            return False
        try:
            path.unlink()
        except FileNotFoundError:
            logger.info(f"File {file_name} already absent from storage")
            return False
        except OSError as e:
            logger.error(f"Error deleting file {file_name}: {e}")
            raise StorageIOError(f"Could not delete {file_name}") from e
        logger.info(f"Deleted file {file_name}")
        return True

    def read_text(self, file_name: str) -> str:
        """
        Read a stored file as UTF-8 text

        Raises:
            NotFoundError: no such file
            StorageIOError: the file could not be read or decoded
        """
        path = self.resolve_path(file_name)
        if path is None or not path.is_file():
            raise NotFoundError(f"File {file_name} not found")
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error reading text file {file_name}: {e}")
            raise StorageIOError(f"Could not read {file_name}") from e

    def _discard(self, path: Path) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except (OSError, ValueError) as e:
            logger.warning(f"Could not remove partial upload {path.name}: {e}")


# Create singleton instance
storage_service = LocalStorageService()


def get_storage_service() -> LocalStorageService:
    """Dependency returning the configured storage service"""
    return storage_service
