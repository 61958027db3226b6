# Raster surface the painter stamps its shapes onto.
import math

import cv2
import numpy as np

# Fractional bits used when handing sub-pixel coordinates to OpenCV.
SHIFT = 4
_SCALE = 1 << SHIFT


def _rgba(color):
    """
    Normalizes an (R, G, B[, A]) color to four ints clamped to 0..255.
    """
    if len(color) == 3:
        color = (*color, 255)
    return tuple(int(min(255, max(0, round(c)))) for c in color)


def regular_polygon(n, x, y, r, rotation=0.0):
    """
    Returns the n vertices of a regular polygon centered at (x, y) with
    circumradius r. Odd polygons point up, even ones sit on a flat edge.
    """
    angle = 2 * math.pi / n
    rotation -= math.pi / 2
    if n % 2 == 0:
        rotation += angle / 2
    t = rotation + angle * np.arange(n)
    return np.stack([x + r * np.cos(t), y + r * np.sin(t)], axis=1)


class Canvas:
    def __init__(self, width, height, background=(0, 0, 0)):
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        # RGB, row-major (y, x)
        self.pixels = np.empty((height, width, 3), dtype=np.uint8)
        self.pixels[:, :] = _rgba(background)[:3]
        self.path = []

    # ------------------------------------------------------------------
    # Path construction
    # ------------------------------------------------------------------
    def clear_path(self):
        self.path = []

    def draw_polygon(self, points):
        points = np.asarray(points, dtype=np.float64).reshape(-1, 2)
        if len(points) >= 2:
            self.path.append(points)

    def draw_circle(self, x, y, r):
        n = max(16, int(math.ceil(math.pi * r)))
        t = np.linspace(0, 2 * math.pi, n, endpoint=False)
        self.draw_polygon(np.stack([x + r * np.cos(t), y + r * np.sin(t)], axis=1))

    def draw_rounded_rectangle(self, x, y, w, h, r):
        """
        Adds a w x h rectangle whose top-left corner is (x, y), with corners
        rounded to radius r.
        """
        r = max(0.0, min(r, w / 2, h / 2))
        if r == 0:
            self.draw_polygon([(x, y), (x + w, y), (x + w, y + h), (x, y + h)])
            return
        steps = max(2, int(math.ceil(math.pi * r / 2)))
        corners = [
            (x + w - r, y + r, -math.pi / 2),   # top right
            (x + w - r, y + h - r, 0.0),        # bottom right
            (x + r, y + h - r, math.pi / 2),    # bottom left
            (x + r, y + r, math.pi),            # top left
        ]
        arcs = []
        for cx, cy, start in corners:
            t = np.linspace(start, start + math.pi / 2, steps + 1)
            arcs.append(np.stack([cx + r * np.cos(t), cy + r * np.sin(t)], axis=1))
        self.draw_polygon(np.concatenate(arcs))

    def draw_regular_polygon(self, n, x, y, r, rotation=0.0):
        self.draw_polygon(regular_polygon(n, x, y, r, rotation))

    # ------------------------------------------------------------------
    # Painting
    # ------------------------------------------------------------------
    def fill_preserve(self, color):
        color = _rgba(color)
        if color[3] == 0:
            return
        roi = self._path_roi(pad=1)
        if roi is None:
            return
        x0, y0, mask, pts = roi
        cv2.fillPoly(mask, pts, 255, lineType=cv2.LINE_AA, shift=SHIFT)
        self._blend(mask, x0, y0, color)

    def fill(self, color):
        self.fill_preserve(color)
        self.clear_path()

    def stroke_preserve(self, color, line_width=1):
        color = _rgba(color)
        if color[3] == 0:
            return
        thickness = max(1, int(round(line_width)))
        roi = self._path_roi(pad=thickness + 1)
        if roi is None:
            return
        x0, y0, mask, pts = roi
        cv2.polylines(mask, pts, True, 255, thickness=thickness,
                      lineType=cv2.LINE_AA, shift=SHIFT)
        self._blend(mask, x0, y0, color)

    def stroke(self, color, line_width=1):
        self.stroke_preserve(color, line_width)
        self.clear_path()

    def _path_roi(self, pad):
        """
        Clips the path's bounding box to the canvas. Returns the box origin,
        an empty coverage mask for it and the path in fixed-point box
        coordinates, or None when nothing of the path lands on the canvas.
        """
        if not self.path:
            return None
        allpts = np.concatenate(self.path)
        x0 = max(0, int(math.floor(allpts[:, 0].min())) - pad)
        y0 = max(0, int(math.floor(allpts[:, 1].min())) - pad)
        x1 = min(self.width, int(math.ceil(allpts[:, 0].max())) + pad + 1)
        y1 = min(self.height, int(math.ceil(allpts[:, 1].max())) + pad + 1)
        if x0 >= x1 or y0 >= y1:
            return None
        origin = np.array([x0, y0], dtype=np.float64)
        pts = [np.round((p - origin) * _SCALE).astype(np.int32) for p in self.path]
        mask = np.zeros((y1 - y0, x1 - x0), dtype=np.uint8)
        return x0, y0, mask, pts

    def _blend(self, mask, x0, y0, color):
        # Source-over: C_out = C_fg * a + C_bg * (1 - a), a = coverage * opacity
        h, w = mask.shape
        alpha = mask.astype(np.float32) * float(color[3]) / 65025.0
        alpha = alpha[..., np.newaxis]
        fg = np.array(color[:3], dtype=np.float32)
        region = self.pixels[y0:y0 + h, x0:x0 + w]
        blended = fg * alpha + region.astype(np.float32) * (1 - alpha)
        region[...] = np.clip(blended + 0.5, 0, 255).astype(np.uint8)

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------
    def image(self):
        """
        Returns a read-only copy of the current pixels (H x W x 3, RGB).
        """
        snapshot = self.pixels.copy()
        snapshot.flags.writeable = False
        return snapshot
