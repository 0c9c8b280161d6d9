"""Image normalization — re-encode uploads to RGB JPEG with Pillow."""

from __future__ import annotations

from PIL import Image, ImageOps, UnidentifiedImageError

NORMALIZED_SUFFIX = ".jpg"

# Pillow can't decode these (or the file is damaged) → caller falls back to the media tool
DecodeFailure = (UnidentifiedImageError, OSError, ValueError)


def normalize_image(source: str, dest: str, quality: int = 95) -> str:
    """Decode *source*, apply EXIF orientation, flatten to RGB and save as JPEG.

    Transparent images are composited onto black so padding matches the
    letterbox colour.

    Raises:
        UnidentifiedImageError / OSError: If Pillow cannot read the image.
    """
    with Image.open(source) as img:
        img.load()
        img = ImageOps.exif_transpose(img)
        if img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info):
            rgba = img.convert("RGBA")
            background = Image.new("RGB", rgba.size, (0, 0, 0))
            background.paste(rgba, mask=rgba.getchannel("A"))
            img = background
        elif img.mode != "RGB":
            img = img.convert("RGB")
        img.save(dest, format="JPEG", quality=quality)
    return dest
