# wavesim/operators.py
import numpy as np
from .grid import ComplexGrid
from .potentials import periodic_delta

FILTER_START = 0.9   # fraction of the Nyquist wavenumber where damping begins

def wave_numbers(n: int, dx: float) -> np.ndarray:
    """FFT-ordered k: 2πm/L for m < n/2, 2π(m-n)/L otherwise."""
    L = n * dx
    m = np.arange(n)
    return 2 * np.pi * np.where(m < n // 2, m, m - n) / L

def dealias_filter(k: np.ndarray, dx: float) -> np.ndarray:
    k_max = np.pi / dx
    k_f = FILTER_START * k_max
    width = k_max - k_f
    return np.where(k > k_f, np.exp(-((k - k_f) / width)**2), 1.0)

def kinetic_operator(n: int, dx: float, dt_eff: float, hbar: float, mass: float,
                     filter_enabled: bool = False) -> ComplexGrid:
    """exp(-iħk²Δt/2m) on the momentum grid."""
    k = wave_numbers(n, dx)
    k2 = k[None, :]**2 + k[:, None]**2
    op = np.exp(1j * (-hbar * dt_eff / (2 * mass)) * k2)
    if filter_enabled:
        op *= dealias_filter(np.sqrt(k2), dx)
    return ComplexGrid(n, op.astype(np.complex128))

def potential_operator_half(V: np.ndarray, dt_eff: float, hbar: float) -> ComplexGrid:
    """exp(-iVΔt/2ħ) on the position grid."""
    return ComplexGrid(V.shape[0], np.exp(1j * (-dt_eff / (2 * hbar)) * V))

def detector_weights(n: int, dx: float, gx: int, gy: int, sigma: float) -> np.ndarray:
    """Gaussian sensitivity exp(-r²/2σ²) about cell (gx, gy), r the periodic distance."""
    L = n * dx
    c = np.arange(n) * dx
    ddx = periodic_delta(c, gx * dx, L)
    ddy = periodic_delta(c, gy * dx, L)
    r2 = ddx[None, :]**2 + ddy[:, None]**2
    return np.exp(-r2 / (2 * sigma * sigma))
