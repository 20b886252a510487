"""
Lattice value noise for the base terrain pass.

Lattice values are a pure function of integer lattice coordinates and a
channel number, so the noise field does not depend on the random stream or
on the order in which other stages draw from it.
"""

from typing import Union

import numpy as np

# Tiles per lattice cell
NOISE_CELL_SIZE = 8

ELEVATION_CHANNEL = 0
MOISTURE_CHANNEL = 1

_MASK32 = 0xFFFFFFFF

IntLike = Union[int, np.ndarray]


def lattice_value(ix: IntLike, iy: IntLike, channel: int = 0) -> Union[float, np.ndarray]:
    """
    Hash integer lattice coordinates to a value in [0, 1).

    Accepts scalars or integer arrays (broadcast together).
    """
    ix = np.asarray(ix, dtype=np.int64)
    iy = np.asarray(iy, dtype=np.int64)
    h = (ix * 374761393 + iy * 668265263 + channel * 2147483647) & _MASK32
    h = ((h ^ (h >> 13)) * 1274126177) & _MASK32
    h = h ^ (h >> 16)
    value = h / float(_MASK32 + 1)
    if value.ndim == 0:
        return float(value)
    return value


def value_noise(size: int, channel: int, cell_size: int = NOISE_CELL_SIZE) -> np.ndarray:
    """
    Sample a ``size x size`` noise field indexed ``[y, x]``.

    Each tile bilinearly interpolates the four lattice corners surrounding
    it. Returned values lie in [0, 1).
    """
    coords = np.arange(size, dtype=np.float64) / cell_size
    base = np.floor(coords).astype(np.int64)
    frac = coords - base

    x0 = base[np.newaxis, :]
    y0 = base[:, np.newaxis]
    tx = frac[np.newaxis, :]
    ty = frac[:, np.newaxis]

    v00 = lattice_value(x0, y0, channel)
    v10 = lattice_value(x0 + 1, y0, channel)
    v01 = lattice_value(x0, y0 + 1, channel)
    v11 = lattice_value(x0 + 1, y0 + 1, channel)

    top = v00 * (1.0 - tx) + v10 * tx
    bottom = v01 * (1.0 - tx) + v11 * tx
    return top * (1.0 - ty) + bottom * ty
