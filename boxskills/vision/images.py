"""Image helpers for preparing content before annotation."""

import logging
from io import BytesIO

from PIL import Image

from boxskills.vision.exceptions import AnnotationImageError

logger = logging.getLogger(__name__)

# Stop shrinking once the longest side reaches this many pixels
MIN_DIMENSION = 256
SCALE_STEP = 0.75


def fit_image_to_limit(content: bytes, max_bytes: int, quality: int = 85) -> bytes:
    """Shrink an image until its JPEG encoding fits within ``max_bytes``.
    
    Content already within the limit is returned unchanged, whatever its
    format. Larger images are decoded, flattened to RGB and re-encoded as
    JPEG, downscaling step by step until the output fits.
    
    Args:
        content: Raw image bytes
        max_bytes: Size limit in bytes (0 disables the limit)
        quality: JPEG quality used for re-encoding
        
    Returns:
        Image bytes no larger than ``max_bytes``
        
    Raises:
        AnnotationImageError: If the content cannot be decoded or cannot be
            reduced below the limit
    """
    if not max_bytes or len(content) <= max_bytes:
        return content
    
    logger.info(
        f"Image is {len(content)} bytes, above the {max_bytes} byte limit; downscaling"
    )
    
    try:
        with Image.open(BytesIO(content)) as source:
            img = _to_rgb(source)
    except (OSError, Image.DecompressionBombError) as e:
        raise AnnotationImageError(
            f"Image of {len(content)} bytes exceeds {max_bytes} bytes and "
            f"could not be decoded for resizing: {e}"
        ) from e
    
    try:
        while True:
            output = BytesIO()
            img.save(output, format="JPEG", quality=quality)
            data = output.getvalue()
            
            if len(data) <= max_bytes:
                logger.debug(f"Re-encoded image at {img.size[0]}x{img.size[1]} ({len(data)} bytes)")
                return data
            
            if max(img.size) <= MIN_DIMENSION:
                raise AnnotationImageError(
                    f"Could not reduce image below {max_bytes} bytes "
                    f"(smallest attempt: {len(data)} bytes)"
                )
            
            width = max(1, int(img.size[0] * SCALE_STEP))
            height = max(1, int(img.size[1] * SCALE_STEP))
            img = img.resize((width, height), Image.LANCZOS)
    finally:
        img.close()


def _to_rgb(img: Image.Image) -> Image.Image:
    """Return an RGB copy of ``img``, flattening alpha onto white."""
    if img.mode == "RGBA":
        background = Image.new("RGB", img.size, (255, 255, 255))
        background.paste(img, mask=img.split()[3])
        return background
    if img.mode != "RGB":
        return img.convert("RGB")
    return img.copy()
