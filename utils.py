# utils.py
import sys


def parse_bbox(text):
    """Parse 'south, west, north, east' into a list of floats.

    Args:
        text: comma separated coordinates in decimal degrees

    Returns:
        list: [south, west, north, east]
    """
    coords = [float(x.strip()) for x in text.split(",")]
    if len(coords) != 4:
        raise ValueError("Please enter exactly 4 values (south, west, north, east)")

    south, west, north, east = coords
    if not (-90 <= south < north <= 90):
        raise ValueError("Invalid latitude values. South must be < North, both between -90 and 90")
    if not (-180 <= west < east <= 180):
        raise ValueError("Invalid longitude values. West must be < East, both between -180 and 180")
    return coords


def format_bbox(bbox):
    south, west, north, east = bbox
    return f"{south},{west},{north},{east}"


def log(*args):
    # progress goes to stderr, stdout carries the extracted records
    print(*args, file=sys.stderr)


def random_color(rng):
    r, g, b = (int(v) for v in rng.integers(0, 256, size=3))
    return f"#{r:02X}{g:02X}{b:02X}"
