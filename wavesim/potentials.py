# wavesim/potentials.py
import logging
from enum import Enum
import numpy as np

logger = logging.getLogger(__name__)

class PotentialType(str, Enum):
    NONE = "none"
    SINGLE = "single"
    DOUBLE = "double"
    SINUSOID = "sinusoid"
    QUADRATIC = "quadratic"
    FREEHAND = "freehand"   # user-painted, never recomputed from a formula

    @classmethod
    def parse(cls, value) -> "PotentialType":
        """Unknown names fall back to NONE with a warning."""
        try:
            return cls(value)
        except ValueError:
            logger.warning('Invalid potential type "%s". Using "none".', value)
            return cls.NONE

def periodic_delta(a: np.ndarray, b: float, length: float) -> np.ndarray:
    """Shorter of the direct and wrapped distance along one axis."""
    d = np.abs(a - b)
    return np.where(d > length / 2, length - d, d)

def coords(n: int, dx: float):
    """Physical x (columns) and y (rows) broadcastable to (n, n)."""
    c = np.arange(n) * dx
    return c[None, :], c[:, None]

def _r2(n, dx, cx, cy):
    L = n * dx
    x, y = coords(n, dx)
    return periodic_delta(x, cx, L)**2 + periodic_delta(y, cy, L)**2

# -------------------------- models --------------------------

def none(n: int, dx: float, strength: float, sigma: float) -> np.ndarray:
    return np.zeros((n, n))

def single(n: int, dx: float, strength: float, sigma: float) -> np.ndarray:
    L = n * dx
    r2 = _r2(n, dx, L / 2, L / 2)
    return -strength * np.exp(-r2 / (2 * sigma * sigma))

def double(n: int, dx: float, strength: float, sigma: float) -> np.ndarray:
    L = n * dx
    s = sigma / 3
    r2_1 = _r2(n, dx, L / 2, L / 3)
    r2_2 = _r2(n, dx, L / 2, 2 * L / 3)
    return -strength * (np.exp(-r2_1 / (2 * s * s)) + np.exp(-r2_2 / (2 * s * s)))

def sinusoid(n: int, dx: float, strength: float, sigma: float) -> np.ndarray:
    # three full periods along y, so V(0) == V(L)
    L = n * dx
    _, y = coords(n, dx)
    return np.broadcast_to(-strength * np.cos(6 * np.pi * y / L), (n, n)).copy()

def quadratic(n: int, dx: float, strength: float, sigma: float) -> np.ndarray:
    L = n * dx
    r2 = _r2(n, dx, L / 2, L / 2)
    return strength / (2 * sigma * sigma) * r2

MODELS = {
    PotentialType.NONE: none,
    PotentialType.SINGLE: single,
    PotentialType.DOUBLE: double,
    PotentialType.SINUSOID: sinusoid,
    PotentialType.QUADRATIC: quadratic,
}

def build(kind: PotentialType, n: int, dx: float, strength: float = 1.0, scale: float = 1.0) -> np.ndarray:
    """V(x, y) of shape (n, n) for a formula-defined potential, well width L/4."""
    if kind not in MODELS:
        raise ValueError(f"{kind.value} potential has no closed form")
    sigma = n * dx / 4
    return MODELS[kind](n, dx, strength, sigma) * scale

def gaussian_brush(n: int, dx: float, gx: int, gy: int, strength: float, radius: float) -> np.ndarray:
    """Periodic Gaussian bump of physical width `radius` centred on cell (gx, gy)."""
    r2 = _r2(n, dx, gx * dx, gy * dx)
    return strength * np.exp(-r2 / (2 * radius * radius))
