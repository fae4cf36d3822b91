"""Tests for capture devices and JPEG normalization."""

import os

import pytest
from PIL import Image

from tutor_reports.exceptions import CaptureDeviceError, InvalidImageError
from tutor_reports.services.enrichment.capture import (
    LOCK_FILENAME,
    DirectoryCaptureDevice,
    encode_jpeg,
    normalize_to_jpeg,
)

JPEG_MAGIC = b"\xff\xd8\xff"


class TestNormalizeToJpeg:
    def test_png_becomes_jpeg(self, png_bytes):
        assert normalize_to_jpeg(png_bytes).startswith(JPEG_MAGIC)

    def test_empty_rejected(self):
        with pytest.raises(InvalidImageError):
            normalize_to_jpeg(b"")

    def test_garbage_rejected(self):
        with pytest.raises(InvalidImageError):
            normalize_to_jpeg(b"definitely not an image")

    def test_alpha_channel_is_flattened(self):
        image = Image.new("RGBA", (4, 4), color=(0, 0, 0, 0))
        assert encode_jpeg(image).startswith(JPEG_MAGIC)


class TestDirectoryCaptureDevice:
    def test_missing_directory(self, tmp_path):
        device = DirectoryCaptureDevice(tmp_path / "nope")
        with pytest.raises(CaptureDeviceError) as exc_info:
            device.acquire()
        assert exc_info.value.reason == "no_device"

    def test_acquire_is_exclusive(self, tmp_path):
        device = DirectoryCaptureDevice(tmp_path)
        handle = device.acquire()

        with pytest.raises(CaptureDeviceError) as exc_info:
            device.acquire()
        assert exc_info.value.reason == "busy"

        handle.release()
        device.acquire().release()

    def test_release_is_idempotent(self, tmp_path):
        handle = DirectoryCaptureDevice(tmp_path).acquire()
        handle.release()
        handle.release()
        assert not (tmp_path / LOCK_FILENAME).exists()

    def test_read_latest_frame(self, tmp_path):
        Image.new("RGB", (2, 2), color=(255, 0, 0)).save(tmp_path / "old.png")
        Image.new("RGB", (3, 3), color=(0, 255, 0)).save(tmp_path / "new.png")
        os.utime(tmp_path / "old.png", (1, 1))

        handle = DirectoryCaptureDevice(tmp_path).acquire()
        try:
            frame = handle.read_frame()
        finally:
            handle.release()

        assert frame.size == (3, 3)

    def test_no_frame(self, tmp_path):
        handle = DirectoryCaptureDevice(tmp_path).acquire()
        with pytest.raises(CaptureDeviceError) as exc_info:
            handle.read_frame()
        handle.release()
        assert exc_info.value.reason == "no_frame"
