# wavesim/fft_serial.py
import numpy as np

def fft_1d(a: list, rev: np.ndarray, tw: np.ndarray, inverse: bool = False) -> list:
    """Radix-2 iterative FFT on a Python list of complex, in place.

    rev is the bit-reversal permutation, tw[k] = exp(-2πi k/n) for k < n/2.
    Forward is unscaled; inverse conjugates the twiddles and divides by n.
    """
    n = len(a)
    for i in range(n):
        j = int(rev[i])
        if i < j:
            a[i], a[j] = a[j], a[i]
    twl = tw.tolist()
    if inverse:
        twl = [w.conjugate() for w in twl]
    length = 2
    while length <= n:
        half = length >> 1
        stride = n // length
        for base in range(0, n, length):
            for off in range(half):
                w = twl[off * stride]
                u = a[base + off]
                v = a[base + off + half] * w
                a[base + off] = u + v
                a[base + off + half] = u - v
        length <<= 1
    if inverse:
        for i in range(n):
            a[i] /= n
    return a

def fft_rows(data: np.ndarray, rev: np.ndarray, tw: np.ndarray, inverse: bool = False):
    """1D FFT along every row (x direction) of a 2D complex array, in place."""
    for r in range(data.shape[0]):
        row = data[r, :].tolist()
        data[r, :] = fft_1d(row, rev, tw, inverse)

def fft_cols(data: np.ndarray, rev: np.ndarray, tw: np.ndarray, inverse: bool = False):
    """1D FFT along every column (y direction) of a 2D complex array, in place."""
    for c in range(data.shape[1]):
        col = data[:, c].tolist()
        data[:, c] = fft_1d(col, rev, tw, inverse)

def multiply(data: np.ndarray, op: np.ndarray):
    """Elementwise data *= op with explicit complex products."""
    n0, n1 = data.shape
    for y in range(n0):
        for x in range(n1):
            a = data[y, x]
            b = op[y, x]
            data[y, x] = complex(a.real*b.real - a.imag*b.imag,
                                 a.real*b.imag + a.imag*b.real)
