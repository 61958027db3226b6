# Image acquisition and export around the painting engine.
import logging
import os
import random

import cv2
import numpy as np
import requests

logger = logging.getLogger(__name__)

RANDOM_IMAGE_URL = "https://loremflickr.com/{width}/{height}/{query}"


def load_image(path):
    """
    Loads an image from disk as an RGB array.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Source image not found at: {path}")
    image = cv2.imread(path, cv2.IMREAD_COLOR)
    if image is None:
        raise FileNotFoundError(f"Could not load image at: {path}")
    logger.info("Loaded %s (%dx%d)", path, image.shape[1], image.shape[0])
    return cv2.cvtColor(image, cv2.COLOR_BGR2RGB)


def decode_image(data):
    buf = np.frombuffer(data, dtype=np.uint8)
    image = cv2.imdecode(buf, cv2.IMREAD_COLOR) if buf.size else None
    if image is None:
        raise ValueError("Response body is not a decodable image")
    return cv2.cvtColor(image, cv2.COLOR_BGR2RGB)


def fetch_random_image(width, height, query="blue", timeout=30):
    """
    Downloads a random photo matching `query` at roughly the requested size.
    """
    url = RANDOM_IMAGE_URL.format(width=width, height=height, query=query)
    logger.info("Fetching %s", url)
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    return decode_image(response.content)


def save_image(image, path):
    """
    Writes an RGB array to `path`; the format follows the file extension.
    """
    logger.info("Saving canvas to %s...", path)
    bgr = cv2.cvtColor(np.ascontiguousarray(image), cv2.COLOR_RGB2BGR)
    try:
        ok = cv2.imwrite(path, bgr)
    except cv2.error as e:
        raise OSError(f"Could not write image to {path}: {e}") from e
    if not ok:
        raise OSError(f"Could not write image to {path}")
    logger.info("Canvas saved.")
    return path


def temp_file_name(prefix, suffix, rng=None):
    rng = rng if rng is not None else random.Random()
    return prefix + rng.getrandbits(64).to_bytes(8, "big").hex() + suffix
