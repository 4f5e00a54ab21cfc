import os
import shutil
import logging
import requests
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse, unquote

from ..config import MEDIA_DIR, DEFAULT_IMAGE_NAME, MEDIA_DOWNLOAD_TIMEOUT

logger = logging.getLogger(__name__)


class MediaStore:
    """
    Durable storage for user-supplied images.

    Pickers and uploads hand over paths into temporary caches that may vanish.
    persist() copies such a file into the application's media directory and
    returns the new, stable path. Copy failures are logged and reported as
    None so callers store the record without an image instead of failing.
    """

    def __init__(self, media_dir: str = MEDIA_DIR, download_timeout: int = MEDIA_DOWNLOAD_TIMEOUT):
        self.media_dir = Path(media_dir)
        self.download_timeout = download_timeout

    def persist(self, source: Optional[str]) -> Optional[str]:
        """
        Copy an image into durable storage.

        Args:
            source: Local path, file:// URI or http(s):// URL of the image

        Returns:
            Stable path of the copy, or None if there was nothing to copy or
            the copy failed
        """
        if not source:
            return None

        try:
            self.media_dir.mkdir(parents=True, exist_ok=True)
            destination = self._unique_destination(self._file_name(source))

            if source.startswith(('http://', 'https://')):
                self._download(source, destination)
            else:
                shutil.copyfile(self._local_path(source), destination)

            return str(destination)
        except (OSError, ValueError, requests.RequestException) as e:
            logger.error(f"Error saving image {source}: {e}")
            return None

    def _file_name(self, source: str) -> str:
        """Base name of the source, or the default image name when there is none."""
        path = urlparse(source).path if '://' in source else source
        name = os.path.basename(unquote(path).rstrip('/\\'))
        return name or DEFAULT_IMAGE_NAME

    def _local_path(self, source: str) -> str:
        if source.startswith('file://'):
            return unquote(urlparse(source).path)
        return source

    def _unique_destination(self, file_name: str) -> Path:
        """Pick a path in the media directory that does not clobber an earlier image."""
        destination = self.media_dir / file_name
        stem, suffix = destination.stem, destination.suffix
        counter = 1
        while destination.exists():
            destination = self.media_dir / f"{stem}_{counter}{suffix}"
            counter += 1
        return destination

    def _download(self, url: str, destination: Path) -> None:
        with requests.get(url, stream=True, timeout=self.download_timeout) as response:
            response.raise_for_status()

            try:
                with open(destination, 'wb') as f:
                    for chunk in response.iter_content(chunk_size=8192):
                        f.write(chunk)
            except (OSError, requests.RequestException):
                # Leave no half-written image behind
                if destination.exists():
                    destination.unlink()
                raise
