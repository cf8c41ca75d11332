"""Detection of an image's format and pixel size."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import BinaryIO

from PIL import Image, UnidentifiedImageError

_MIN_LENGTH = 10


class ImageDataTooShortError(ValueError):
    """The image data is too short to hold any known header."""

    def __init__(self, message: str = "image data is too short") -> None:
        super().__init__(message)


class ImageFormat(enum.IntEnum):
    """Image formats with their protocol codes."""

    UNKNOWN = 0
    JPEG = 1000
    PNG = 1001
    WEBP = 1002
    BMP = 1005
    TIFF = 1006
    GIF = 2000

    def __str__(self) -> str:
        return _EXTENSIONS.get(self, "unknown")


_EXTENSIONS = {
    ImageFormat.JPEG: "jpg",
    ImageFormat.PNG: "png",
    ImageFormat.GIF: "gif",
    ImageFormat.WEBP: "webp",
    ImageFormat.BMP: "bmp",
    ImageFormat.TIFF: "tiff",
}

_FORMATS = {
    "jpeg": ImageFormat.JPEG,
    "png": ImageFormat.PNG,
    "gif": ImageFormat.GIF,
    "webp": ImageFormat.WEBP,
    "bmp": ImageFormat.BMP,
    "tiff": ImageFormat.TIFF,
}


@dataclass(frozen=True)
class ImageSize:
    """Width and height in pixels."""

    width: int
    height: int


def image_resolve(stream: BinaryIO) -> tuple[ImageFormat, ImageSize]:
    """Return the format and size of the image in a seekable stream.

    The stream is rewound afterwards. Raises ImageDataTooShortError for data
    under ten bytes and ValueError when the image cannot be recognised.
    """
    try:
        end = stream.seek(0, 2)
        if end < _MIN_LENGTH:
            raise ImageDataTooShortError()
        stream.seek(0)
        try:
            with Image.open(stream) as im:
                name = (im.format or "").lower()
                width, height = im.size
        except UnidentifiedImageError as exc:
            raise ValueError("unknown image format") from exc
        return _FORMATS.get(name, ImageFormat.UNKNOWN), ImageSize(width, height)
    finally:
        stream.seek(0)