from __future__ import annotations
import logging

import cv2
import numpy as np

from .errors import ImageEncodeError

logger = logging.getLogger(__name__)

START_QUALITY = 95
MIN_QUALITY = 20
QUALITY_STEP = 5


def encode_jpeg(img_bgr: np.ndarray, quality: int) -> bytes:
    ok, buf = cv2.imencode(".jpg", img_bgr, [int(cv2.IMWRITE_JPEG_QUALITY), int(quality)])
    if not ok:
        raise ImageEncodeError(f"JPEG encode failed at quality {quality}")
    return buf.tobytes()


def encode_within_budget(img_bgr: np.ndarray, max_kb: int) -> bytes:
    """Highest quality (95, 90, ... 20) whose size in KiB (floor) is <= max_kb.

    The budget is best effort: when even quality 20 is too large the
    quality-20 encoding is returned anyway, so any decoded image always
    gets an encoding. Only an empty or missing array raises
    ImageEncodeError; a successful decode never produces one.
    """
    if img_bgr is None or img_bgr.size == 0:
        raise ImageEncodeError("empty image")

    data = b""
    quality = START_QUALITY
    while quality >= MIN_QUALITY:
        data = encode_jpeg(img_bgr, quality)
        if len(data) // 1024 <= max_kb:
            logger.debug(f"Encoded at quality {quality}: {len(data)} bytes")
            return data
        quality -= QUALITY_STEP

    if quality + QUALITY_STEP != MIN_QUALITY:
        data = encode_jpeg(img_bgr, MIN_QUALITY)
    logger.debug(f"Budget {max_kb}KB not reachable, using quality {MIN_QUALITY}: {len(data)} bytes")
    return data
