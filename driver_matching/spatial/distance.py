"""Squared Euclidean distance on integer grid coordinates"""

import numpy as np


def squared_euclidean(ax: int, ay: int, bx: int, by: int) -> int:
    """
    (ax-bx)^2 + (ay-by)^2 as an exact integer.

    Inputs are coerced to Python ints first so numpy int32 coordinates
    cannot overflow.
    """
    dx = int(ax) - int(bx)
    dy = int(ay) - int(by)
    return dx * dx + dy * dy


def squared_euclidean_many(qx: int, qy: int, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
    """Vectorized squared distance from (qx, qy) to every (xs[i], ys[i]), in int64"""
    dx = xs.astype(np.int64) - np.int64(qx)
    dy = ys.astype(np.int64) - np.int64(qy)
    return dx * dx + dy * dy


def point_rect_squared_distance(qx: int, qy: int, x0: int, y0: int, x1: int, y1: int) -> int:
    """
    Squared distance from (qx, qy) to the closest cell of [x0,x1] x [y0,y1].

    Zero when the point lies inside the rectangle.
    """
    cx = min(max(qx, x0), x1)
    cy = min(max(qy, y0), y1)
    return squared_euclidean(qx, qy, cx, cy)
