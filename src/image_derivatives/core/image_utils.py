"""Image codec utilities: decode, encode and resize with Pillow."""

import io
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from PIL import Image, ImageSequence

from .error_handling import with_error_handling


class ImageFormat(str, Enum):
    """Output formats a resize can target."""

    JPEG = "jpeg"
    PNG = "png"
    GIF = "gif"
    WEBP = "webp"
    BMP = "bmp"
    TIFF = "tiff"

    @property
    def extension(self) -> str:
        """File extension for the format, with the leading dot."""
        return ".jpg" if self is ImageFormat.JPEG else f".{self.value}"

    @property
    def pillow_name(self) -> str:
        return self.value.upper()

    @classmethod
    def from_pillow(cls, name: Optional[str]) -> "ImageFormat":
        """Map a Pillow format name (``img.format``) to an ImageFormat."""
        if not name:
            raise ValueError("Image format could not be determined")
        if name.upper() == "MPO":
            # multi-picture JPEGs written by some cameras
            return cls.JPEG
        return cls(name.lower())


FORMAT_ALIASES: Dict[str, str] = {"jpg": "jpeg", "tif": "tiff"}

# Modes each format can encode without conversion.
SUPPORTED_MODES: Dict[ImageFormat, Tuple[str, ...]] = {
    ImageFormat.JPEG: ("RGB", "L", "CMYK"),
    ImageFormat.PNG: ("RGB", "RGBA", "L", "LA", "P", "1", "I", "I;16"),
    ImageFormat.GIF: ("P", "L", "RGB", "RGBA", "1"),
    ImageFormat.WEBP: ("RGB", "RGBA"),
    ImageFormat.BMP: ("RGB", "L", "P", "1"),
    ImageFormat.TIFF: ("RGB", "RGBA", "L", "CMYK", "P", "1", "I", "F"),
}

DEFAULT_JPEG_QUALITY = 75

# Formats that can store several frames.
ANIMATED_FORMATS: Tuple[ImageFormat, ...] = (
    ImageFormat.GIF,
    ImageFormat.WEBP,
    ImageFormat.PNG,
    ImageFormat.TIFF,
)


@with_error_handling
def decode_image(data: bytes) -> "Image.Image":
    """
    Decode raw bytes into a fully loaded Pillow image.

    Raises:
        CodecError: If the bytes are not a readable image.
    """
    image = Image.open(io.BytesIO(data))
    image.load()
    return image


def source_format(image: "Image.Image") -> ImageFormat:
    return ImageFormat.from_pillow(image.format)


def target_dimensions(width: int, height: int, size: int) -> Tuple[int, int]:
    """
    Scale (width, height) so the longer side equals ``size``.

    The aspect ratio is preserved; the shorter side is rounded and never
    drops below one pixel.
    """
    if width >= height:
        return size, max(1, round(height * size / width))
    return max(1, round(width * size / height)), size


@with_error_handling
def resize_image(image: "Image.Image", size: int) -> "Image.Image":
    """Resize so that the longer dimension equals ``size``."""
    dimensions = target_dimensions(image.width, image.height, size)
    if dimensions == image.size:
        return image.copy()
    if image.mode == "P":
        image = image.convert("RGBA" if "transparency" in image.info else "RGB")
    return image.resize(dimensions, Image.Resampling.LANCZOS)


def frame_count(image: "Image.Image") -> int:
    return getattr(image, "n_frames", 1)


def image_frames(image: "Image.Image") -> List["Image.Image"]:
    """Every frame of an animated image, or just the image itself."""
    if frame_count(image) == 1:
        return [image]
    return [frame.copy() for frame in ImageSequence.Iterator(image)]


@with_error_handling
def resize_frames(image: "Image.Image", size: int) -> List["Image.Image"]:
    """Resize every frame so that the longer dimension equals ``size``."""
    return [resize_image(frame, size) for frame in image_frames(image)]


def prepare_mode(image: "Image.Image", image_format: ImageFormat) -> "Image.Image":
    """Convert the image into a mode the target format can encode."""
    if image.mode in SUPPORTED_MODES[image_format]:
        return image
    if image_format is ImageFormat.JPEG and image.mode in ("RGBA", "LA", "P"):
        # flatten transparency onto white
        rgba = image.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    return image.convert("RGBA" if "A" in image.mode else "RGB")


def encode_options(
    image_format: ImageFormat, quality: Optional[int], optimize: bool
) -> Dict[str, Any]:
    options: Dict[str, Any] = {}
    if image_format is ImageFormat.JPEG:
        options["quality"] = quality or DEFAULT_JPEG_QUALITY
        if optimize:
            options.update(optimize=True, progressive=True)
    elif image_format is ImageFormat.WEBP and quality is not None:
        options["quality"] = quality
    elif image_format is ImageFormat.PNG and optimize:
        options["optimize"] = True
    return options


@with_error_handling
def encode_frames(
    frames: Sequence["Image.Image"],
    image_format: ImageFormat,
    quality: Optional[int] = None,
    optimize: bool = False,
    info: Optional[Dict[str, Any]] = None,
) -> bytes:
    """
    Encode one or more frames to bytes.

    Several frames are written as an animation when the target format can
    hold one; otherwise only the first frame is encoded.

    Args:
        frames: Frames to encode, in display order
        image_format: Target format
        quality: Lossy quality 1..100, format default when None
        optimize: Ask the encoder for a smaller output (slower)
        info: Source ``Image.info``, read for the loop count

    Returns:
        Encoded image bytes
    """
    if image_format not in ANIMATED_FORMATS:
        frames = frames[:1]
    prepared = [prepare_mode(frame, image_format) for frame in frames]
    options = encode_options(image_format, quality, optimize)
    if len(prepared) > 1:
        options.update(animation_options(prepared, image_format, info or {}))

    output = io.BytesIO()
    prepared[0].save(output, format=image_format.pillow_name, **options)
    return output.getvalue()


def animation_options(
    frames: Sequence["Image.Image"], image_format: ImageFormat, info: Dict[str, Any]
) -> Dict[str, Any]:
    options: Dict[str, Any] = {"save_all": True, "append_images": list(frames[1:])}
    if image_format is not ImageFormat.TIFF:
        options["duration"] = [
            frame.info.get("duration", info.get("duration", 100)) for frame in frames
        ]
        if "loop" in info:
            options["loop"] = info["loop"]
    return options


@with_error_handling
def encode_image(
    image: "Image.Image",
    image_format: ImageFormat,
    quality: Optional[int] = None,
    optimize: bool = False,
) -> bytes:
    """Encode a Pillow image, keeping every frame of an animation."""
    info = dict(image.info)
    return encode_frames(image_frames(image), image_format, quality, optimize, info)


def image_size(data: bytes) -> Tuple[int, int]:
    """Return (width, height) of encoded image bytes."""
    return decode_image(data).size
