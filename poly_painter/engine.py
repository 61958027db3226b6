# This file contains the core painting engine class and logic.
import logging
import random
from typing import NamedTuple, Optional, Tuple

import numpy as np

from poly_painter.canvas import Canvas
from poly_painter.config import PainterConfig
from poly_painter.shapes import add_shape, outline_color

logger = logging.getLogger(__name__)


class Dab(NamedTuple):
    """Everything drawn by a single step."""
    source: Tuple[float, float]
    dest: Tuple[float, float]
    color: Tuple[int, int, int]
    shape: str
    edges: Optional[int]
    size: float
    alpha: float
    outlined: bool


def as_rgb8(image):
    """
    Reduces a decoded image to an H x W x 3 uint8 RGB array.
    Grayscale is expanded, an alpha channel is dropped and 16-bit data is
    scaled down.
    """
    image = np.asarray(image)
    if image.ndim == 2:
        image = np.stack([image] * 3, axis=-1)
    if image.ndim != 3 or image.shape[0] == 0 or image.shape[1] == 0:
        raise ValueError(f"Expected a non-empty image, got array of shape {image.shape}")
    if image.shape[2] == 1:
        image = np.repeat(image, 3, axis=2)
    elif image.shape[2] == 4:
        image = image[:, :, :3]
    elif image.shape[2] != 3:
        raise ValueError(f"Unsupported channel count: {image.shape[2]}")

    if image.dtype == np.bool_:
        image = image * 255
    elif np.issubdtype(image.dtype, np.floating):
        image = np.clip(image, 0.0, 1.0) * 255.0 + 0.5
    elif image.dtype != np.uint8 and np.issubdtype(image.dtype, np.integer):
        # Wider integer decodes (e.g. 16-bit PNGs read as uint16 or int32)
        # are taken as 8-bit when they fit, otherwise as 16-bit.
        lo, hi = int(image.min()), int(image.max())
        if lo < 0 or hi > 65535:
            raise ValueError(f"Pixel values {lo}..{hi} do not fit an 8- or 16-bit image")
        if image.dtype == np.uint16 or hi > 255:
            image = image // 257
    elif image.dtype != np.uint8:
        raise ValueError(f"Unsupported pixel type: {image.dtype}")
    return image.astype(np.uint8)


class Painter:
    def __init__(self, source, config=None, rng=None):
        self.config = config if config is not None else PainterConfig()
        self.source = as_rgb8(source)
        self.source.flags.writeable = False
        self.source_height, self.source_width = self.source.shape[:2]
        self.rng = rng if rng is not None else random.Random()

        self.initial_stroke_size = self.config.initial_stroke_size
        self.stroke_size = self.initial_stroke_size
        self.alpha = self.config.initial_alpha
        self.iteration = 0
        self.last_dab = None

        # Start from a solid black canvas of the destination size.
        self.canvas = Canvas(self.config.dest_width, self.config.dest_height)

        logger.info(
            "Painter initialized: source %dx%d -> canvas %dx%d, shape=%s",
            self.source_width, self.source_height,
            self.config.dest_width, self.config.dest_height, self.config.shape.value,
        )

    @property
    def outline_inverted(self):
        return self.stroke_size <= self.config.inversion_stroke_size

    def _jitter(self):
        j = self.config.stroke_jitter
        return self.rng.randint(-j, j)

    def step(self):
        """
        Paints one dab and decays the stroke parameters.
        """
        cfg = self.config

        # Step 1
        # choose a random point on the source image and get its color
        src_x = self.rng.random() * self.source_width
        src_y = self.rng.random() * self.source_height
        px = min(int(src_x), self.source_width - 1)
        py = min(int(src_y), self.source_height - 1)
        r, g, b = (int(c) for c in self.source[py, px])

        # Step 2
        # place the shape at more or less the same spot on the canvas
        dest_x = src_x * cfg.dest_width / self.source_width + self._jitter()
        dest_y = src_y * cfg.dest_height / self.source_height + self._jitter()

        # Step 3
        # build the shape path
        edges = add_shape(self.canvas, cfg.shape, dest_x, dest_y, self.stroke_size, cfg, self.rng)

        # Step 4
        # fill with the sampled color
        if cfg.fill:
            self.canvas.fill_preserve((r, g, b, round(self.alpha)))

        # Step 5
        # outline in black or white once the strokes have become small enough,
        # otherwise the outline is fully transparent and the path is dropped
        outlined = cfg.stroke and self.outline_inverted
        if outlined:
            self.canvas.stroke(outline_color((r, g, b), self.alpha))
        else:
            self.canvas.clear_path()

        self.last_dab = Dab(
            source=(src_x, src_y),
            dest=(dest_x, dest_y),
            color=(r, g, b),
            shape=cfg.shape.value,
            edges=edges,
            size=self.stroke_size,
            alpha=self.alpha,
            outlined=outlined,
        )
        logger.debug("dab %d: %s", self.iteration, self.last_dab)

        # Step 6
        # shrink the stroke and raise the alpha for the next run
        self.stroke_size -= cfg.stroke_reduction * self.stroke_size
        self.alpha += cfg.alpha_increase
        self.iteration += 1

    def run(self, iterations, progress_every=0):
        """
        Calls step() `iterations` times, logging progress every
        `progress_every` iterations when non-zero.
        """
        logger.info("Painting %d iterations...", iterations)
        for i in range(iterations):
            self.step()
            if progress_every and (i + 1) % progress_every == 0:
                logger.info(
                    "%d/%d  stroke size %.2f  alpha %.2f",
                    i + 1, iterations, self.stroke_size, self.alpha,
                )
        logger.info("Painting process finished.")

    def output(self):
        return self.canvas.image()
