"""Capture devices and JPEG encoding for worksheet images."""

import io
import os
from abc import ABC, abstractmethod
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from tutor_reports.exceptions import CaptureDeviceError, InvalidImageError
from tutor_reports.utils.logger import get_logger

log = get_logger(__name__)

FRAME_SUFFIXES = (".jpg", ".jpeg", ".png", ".bmp", ".webp")
LOCK_FILENAME = ".capture.lock"


def encode_jpeg(image: Image.Image, quality: int = 92) -> bytes:
    """Encode a frame as a baseline JPEG payload."""
    buffer = io.BytesIO()
    image.convert("RGB").save(buffer, format="JPEG", quality=quality)
    return buffer.getvalue()


def normalize_to_jpeg(data: bytes, quality: int = 92) -> bytes:
    """
    Decode an uploaded image of any supported format and re-encode it as JPEG.

    Raises:
        InvalidImageError: If the data is empty or not a decodable image
    """
    if not data:
        raise InvalidImageError("empty upload")
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            return encode_jpeg(image, quality)
    except (UnidentifiedImageError, OSError) as e:
        raise InvalidImageError(str(e)) from e


class CaptureHandle(ABC):
    """Exclusive handle on a capture device. Must be released on every exit path."""

    @abstractmethod
    def read_frame(self) -> Image.Image:
        """Return the current frame."""
        pass

    @abstractmethod
    def release(self) -> None:
        """Give the device back. Safe to call more than once."""
        pass


class BaseCaptureDevice(ABC):
    """A live image source that must be acquired exclusively."""

    @abstractmethod
    def acquire(self) -> CaptureHandle:
        """
        Take exclusive ownership of the device.

        Raises:
            CaptureDeviceError: If the device is missing, busy, or not permitted
        """
        pass


class _DirectoryHandle(CaptureHandle):
    def __init__(self, directory: Path, lock_path: Path):
        self.directory = directory
        self.lock_path = lock_path
        self.released = False

    def read_frame(self) -> Image.Image:
        frames = [
            p for p in self.directory.iterdir()
            if p.is_file() and p.suffix.lower() in FRAME_SUFFIXES
        ]
        if not frames:
            raise CaptureDeviceError("no_frame")
        latest = max(frames, key=lambda p: p.stat().st_mtime)
        try:
            with Image.open(latest) as image:
                image.load()
                return image.copy()
        except (UnidentifiedImageError, OSError) as e:
            raise CaptureDeviceError("unreadable_frame") from e

    def release(self) -> None:
        if self.released:
            return
        self.lock_path.unlink(missing_ok=True)
        self.released = True
        log.debug("capture device released", device=str(self.directory))


class DirectoryCaptureDevice(BaseCaptureDevice):
    """
    Camera exposed as a directory of frames written by an external capture process.

    The newest image file is the current frame. Exclusivity is a lock file
    created with O_EXCL inside the directory.
    """

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    @property
    def lock_path(self) -> Path:
        return self.directory / LOCK_FILENAME

    def acquire(self) -> CaptureHandle:
        if not self.directory.is_dir():
            raise CaptureDeviceError("no_device")
        try:
            fd = os.open(self.lock_path, os.O_CREAT | os.O_EXCL | os.O_WRONLY)
        except FileExistsError as e:
            raise CaptureDeviceError("busy") from e
        except PermissionError as e:
            raise CaptureDeviceError("permission_denied") from e
        os.close(fd)
        log.debug("capture device acquired", device=str(self.directory))
        return _DirectoryHandle(self.directory, self.lock_path)
