# wavesim/fft2d.py
from typing import Optional
import numpy as np
from .grid import ComplexGrid, is_power_of_two

BACKENDS = ("numpy", "serial", "numba")

def bit_reversal(n: int) -> np.ndarray:
    bits = n.bit_length() - 1
    rev = np.zeros(n, dtype=np.int64)
    for i in range(n):
        rev[i] = int(format(i, f"0{bits}b")[::-1], 2) if bits else 0
    return rev

def twiddles(n: int) -> np.ndarray:
    """Forward twiddle factors exp(-2πi k/n), k = 0 .. n/2-1."""
    k = np.arange(max(n // 2, 1))
    return np.exp(-2j * np.pi * k / n)

class FFT2D:
    """
    In-place 2D DFT over a ComplexGrid by row-then-column 1D transforms.

    Forward uses the numpy sign convention (unscaled), so momentum index n
    maps to k = 2πn/L for n < N/2 and 2π(n-N)/L otherwise. Inverse runs
    columns then rows and divides by N per axis.
    """

    def __init__(self, n: int, backend: str = "numpy", num_threads: Optional[int] = None):
        if not is_power_of_two(n):
            raise ValueError(f"FFT size must be a power of 2, got {n}")
        self.n = n
        self.backend = backend
        # plan shared by rows and columns (square grid)
        self.rev = bit_reversal(n)
        self.tw = twiddles(n)

        if backend == "numpy":
            self._rows = self._np_rows
            self._cols = self._np_cols
            self._mul = self._np_multiply
        elif backend == "serial":
            from .fft_serial import fft_rows, fft_cols, multiply
            self._rows, self._cols, self._mul = fft_rows, fft_cols, multiply
        elif backend == "numba":
            try:
                from .fft_numba import fft_rows, fft_cols, multiply, set_threads
            except Exception as e:
                raise RuntimeError("Numba backend not available. Did you `pip install numba`?") from e
            if num_threads is not None:
                set_threads(int(num_threads))
            self._rows, self._cols, self._mul = fft_rows, fft_cols, multiply
        else:
            raise NotImplementedError(f"Unknown backend: {backend}")

    # numpy backend: pocketfft along one axis at a time
    @staticmethod
    def _np_rows(data, rev, tw, inverse=False):
        data[:] = np.fft.ifft(data, axis=1) if inverse else np.fft.fft(data, axis=1)

    @staticmethod
    def _np_cols(data, rev, tw, inverse=False):
        data[:] = np.fft.ifft(data, axis=0) if inverse else np.fft.fft(data, axis=0)

    @staticmethod
    def _np_multiply(data, op):
        np.multiply(data, op, out=data)

    def _check(self, grid: ComplexGrid):
        if grid.n != self.n:
            raise ValueError(f"grid size {grid.n} does not match FFT size {self.n}")

    def forward(self, grid: ComplexGrid):
        """Position space -> momentum space, in place."""
        self._check(grid)
        self._rows(grid.data, self.rev, self.tw, False)
        self._cols(grid.data, self.rev, self.tw, False)

    def inverse(self, grid: ComplexGrid):
        """Momentum space -> position space, in place."""
        self._check(grid)
        self._cols(grid.data, self.rev, self.tw, True)
        self._rows(grid.data, self.rev, self.tw, True)

    def multiply(self, grid: ComplexGrid, op: ComplexGrid):
        """Pointwise grid *= op with this backend's kernel."""
        self._check(grid)
        self._mul(grid.data, op.data)
