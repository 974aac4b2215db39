# wavesim/grid.py
import logging
import numpy as np
from dataclasses import dataclass

logger = logging.getLogger(__name__)

NORM_EPS = 1e-10

def is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0

@dataclass
class ComplexGrid:
    n: int
    data: np.ndarray  # shape (n, n), complex128; row y, column x

    def __post_init__(self):
        if self.data.shape != (self.n, self.n) or self.data.dtype != np.complex128:
            raise ValueError(f"expected ({self.n}, {self.n}) complex128 data, "
                             f"got {self.data.shape} {self.data.dtype}")

    @staticmethod
    def zeros(n: int) -> "ComplexGrid":
        return ComplexGrid(n=n, data=np.zeros((n, n), dtype=np.complex128))

    @property
    def buffer(self) -> np.ndarray:
        """Flat interleaved [re0, im0, re1, im1, ...] view of length 2*n*n."""
        return self.data.reshape(-1).view(np.float64)

    def _check(self, x: int, y: int):
        if not (0 <= x < self.n and 0 <= y < self.n):
            raise IndexError(f"cell ({x}, {y}) outside {self.n}x{self.n} grid")

    # ------------------------- cell access -------------------------

    def get(self, x: int, y: int) -> complex:
        self._check(x, y)
        return complex(self.data[y, x])

    def set(self, x: int, y: int, re: float, im: float = 0.0):
        self._check(x, y)
        self.data[y, x] = complex(re, im)

    def magnitude_squared(self, x: int, y: int) -> float:
        self._check(x, y)
        v = self.data[y, x]
        return float(v.real * v.real + v.imag * v.imag)

    def magnitude(self, x: int, y: int) -> float:
        return float(np.sqrt(self.magnitude_squared(x, y)))

    def phase(self, x: int, y: int) -> float:
        self._check(x, y)
        v = self.data[y, x]
        return float(np.arctan2(v.imag, v.real))

    def zero_cell(self, x: int, y: int):
        self._check(x, y)
        self.data[y, x] = 0.0

    def zero_circular_region(self, cx: int, cy: int, radius: float):
        """Zero every cell within `radius` cells of (cx, cy), no wrapping."""
        self._check(cx, cy)
        idx = np.arange(self.n)
        r2 = (idx[None, :] - cx)**2 + (idx[:, None] - cy)**2
        self.data[r2 <= radius * radius] = 0.0

    # ------------------------- whole grid -------------------------

    def scale_in_place(self, factor: float):
        self.data *= factor

    def copy_from(self, other: "ComplexGrid"):
        if other.n != self.n:
            raise ValueError(f"grid size mismatch: {other.n} != {self.n}")
        np.copyto(self.data, other.data)

    def zero(self):
        self.data.fill(0.0)

    def sum_of_squared_magnitudes(self) -> float:
        return float(np.vdot(self.data, self.data).real)

    def density(self) -> np.ndarray:
        return self.data.real**2 + self.data.imag**2

    def phases(self) -> np.ndarray:
        return np.angle(self.data)

    def check_normalized(self, tol=1e-6):
        n2 = self.sum_of_squared_magnitudes()
        if not (abs(1.0 - n2) <= tol):
            raise AssertionError(f"Normalization failed: sum|psi|^2={n2}")

    def copy(self) -> "ComplexGrid":
        return ComplexGrid(self.n, self.data.copy())

def compute_norm(grid: ComplexGrid) -> float:
    return float(np.sqrt(grid.sum_of_squared_magnitudes()))

def normalize(grid: ComplexGrid) -> float:
    """Scale to sum|psi|^2 = 1. Near-zero grids are left untouched. Returns the old norm."""
    norm = compute_norm(grid)
    if norm > NORM_EPS:
        grid.scale_in_place(1.0 / norm)
    else:
        logger.warning("Cannot normalize near-zero wavefunction (norm=%.3e)", norm)
    return norm
