# Shape selection: turns a shape kind and the current stroke size into a path.
from poly_painter.config import Shape

WHITE = (255, 255, 255)
BLACK = (0, 0, 0)

# Fixed edge counts for the named regular shapes.
FIXED_EDGES = {
    Shape.SQUARE: 4,
    Shape.HEXAGON: 6,
}


def add_shape(canvas, shape, x, y, size, config, rng):
    """
    Appends the path for one dab centered at (x, y) to the canvas.

    Regular polygons get a random rotation in [0, rotation_jitter). The
    generic polygon also draws its edge count from
    [min_edge_count, max_edge_count]. Returns the edge count, or None for
    the circle and the rounded square.
    """
    shape = Shape.parse(shape)
    if shape is Shape.CIRCLE:
        canvas.draw_circle(x, y, size)
        return None
    if shape is Shape.ROUNDED_SQUARE:
        canvas.draw_rounded_rectangle(x, y, size, size, size / 12)
        return None

    if shape in FIXED_EDGES:
        edges = FIXED_EDGES[shape]
    else:
        edges = rng.randint(config.min_edge_count, config.max_edge_count)
    rotation = rng.random() * config.rotation_jitter
    canvas.draw_regular_polygon(edges, x, y, size, rotation)
    return edges


def outline_color(rgb, alpha):
    """
    Contrast outline for a sampled color: white on dark samples, black on
    light ones, at twice the fill opacity.
    """
    r, g, b = (int(c) for c in rgb)
    base = WHITE if (r + g + b) / 3 < 128 else BLACK
    return (*base, round(alpha * 2))
