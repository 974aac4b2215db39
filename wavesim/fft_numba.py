# wavesim/fft_numba.py
import numpy as np
from numba import njit, prange, set_num_threads, get_num_threads

# ---------- low-level kernels (Numba JIT) ----------

@njit(fastmath=True)
def _fft_1d(a, rev, tw, inverse):
    n = a.shape[0]
    for i in range(n):
        j = rev[i]
        if i < j:
            t = a[i]
            a[i] = a[j]
            a[j] = t
    length = 2
    while length <= n:
        half = length >> 1
        stride = n // length
        for base in range(0, n, length):
            for off in range(half):
                w = tw[off * stride]
                if inverse:
                    w = w.conjugate()
                u = a[base + off]
                v = a[base + off + half] * w
                a[base + off] = u + v
                a[base + off + half] = u - v
        length <<= 1
    if inverse:
        for i in range(n):
            a[i] = a[i] / n

@njit(parallel=True, fastmath=True)
def _fft_rows_kernel(data, rev, tw, inverse):
    for r in prange(data.shape[0]):
        _fft_1d(data[r], rev, tw, inverse)

@njit(parallel=True, fastmath=True)
def _fft_cols_kernel(data, rev, tw, inverse):
    for c in prange(data.shape[1]):
        col = data[:, c].copy()
        _fft_1d(col, rev, tw, inverse)
        data[:, c] = col

@njit(parallel=True, fastmath=True)
def _multiply_kernel(data, op):
    n0, n1 = data.shape
    for y in prange(n0):
        for x in range(n1):
            data[y, x] = data[y, x] * op[y, x]

# ---------- user-facing helpers ----------

def set_threads(n: int):
    set_num_threads(n)

def get_threads() -> int:
    return get_num_threads()

def fft_rows(data: np.ndarray, rev: np.ndarray, tw: np.ndarray, inverse: bool = False):
    _fft_rows_kernel(data, rev, tw, inverse)

def fft_cols(data: np.ndarray, rev: np.ndarray, tw: np.ndarray, inverse: bool = False):
    _fft_cols_kernel(data, rev, tw, inverse)

def multiply(data: np.ndarray, op: np.ndarray):
    _multiply_kernel(data, op)
