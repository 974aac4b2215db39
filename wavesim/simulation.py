# wavesim/simulation.py
"""
Single particle on a 2D periodic grid, evolved with the split-operator
method and measured with a Gaussian detector.

Units are natural (ħ = m = 1 by default). Positions handed to
`initialize` are physical; cells handed to `measure` and the collapse
methods are grid indices (column x, row y).
"""
import logging
from dataclasses import dataclass
from typing import Optional, Union
import numpy as np

from .config import (SimulationConfig, SimulationParameters, BOUNDARY_CONDITIONS,
                     DEFAULT_WIDTH_CELLS, MEASUREMENT_RADIUS_RANGE, STRENGTH_SCALE_RANGE,
                     FREEHAND_ATTENUATION, clamp)
from .fft2d import FFT2D
from .grid import ComplexGrid, is_power_of_two, normalize
from .operators import kinetic_operator, potential_operator_half, detector_weights
from . import potentials as P
from .potentials import PotentialType

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class MeasurementResult:
    found: bool
    probability: float

class QuantumSimulation:
    def __init__(self, grid_size: int, dx: float, dt: float, hbar: float = 1.0, mass: float = 1.0,
                 boundary_condition: str = "periodic", time_scale: float = 1.0,
                 backend: str = "numpy", num_threads: Optional[int] = None,
                 rng: Optional[np.random.Generator] = None, seed: Optional[int] = None):
        if not is_power_of_two(grid_size):
            raise ValueError(f"Grid size must be a power of 2 for FFT, got {grid_size}")
        if boundary_condition not in BOUNDARY_CONDITIONS:
            raise NotImplementedError(f"Unknown boundary condition: {boundary_condition}")

        self.config = SimulationConfig(grid_size=grid_size, dx=dx, dt=dt, hbar=hbar, mass=mass,
                                       boundary_condition=boundary_condition, time_scale=time_scale)
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self._check_stability()

        N = grid_size
        self.psi = ComplexGrid.zeros(N)
        self.fft = FFT2D(N, backend=backend, num_threads=num_threads)
        self._potential = np.zeros((N, N))
        self._precompute_kinetic()
        self._precompute_potential()
        self._precompute_potential_operator()

        self._time = 0.0
        self.initialize()

    # ------------------------- derived data -------------------------

    def _check_stability(self):
        c = self.config
        if not c.is_stable():
            logger.warning("Time step dt*timeScale = %g exceeds stability limit %g. "
                           "Consider reducing dt or timeScale.", c.dt_effective, c.stability_limit)

    def _precompute_kinetic(self):
        c = self.config
        self.kinetic_op = kinetic_operator(c.grid_size, c.dx, c.dt_effective, c.hbar, c.mass,
                                           filter_enabled=c.filter_enabled)

    def _precompute_potential(self):
        c = self.config
        if c.potential_type is PotentialType.FREEHAND:
            return  # keep the painted potential
        self._potential[:] = P.build(c.potential_type, c.grid_size, c.dx,
                                     strength=c.potential_strength, scale=c.potential_strength_scale)

    def _precompute_potential_operator(self):
        c = self.config
        self.potential_op = potential_operator_half(self._potential, c.dt_effective, c.hbar)

    # ------------------------- state setup -------------------------

    def initialize(self, center_x: Optional[float] = None, center_y: Optional[float] = None,
                   width: Optional[float] = None, momentum_x: float = 0.0, momentum_y: float = 0.0):
        """
        Gaussian wavepacket
            psi = exp(-((x-x0)^2 + (y-y0)^2) / 4σ^2) * exp(i(px x + py y)/ħ)
        with discrete normalization sum|psi|^2 = 1. Resets the clock.
        """
        c = self.config
        N, L = c.grid_size, c.domain_size
        x0 = L / 2 if center_x is None else center_x
        y0 = L / 2 if center_y is None else center_y
        sigma = DEFAULT_WIDTH_CELLS * c.dx if width is None else width

        logger.debug("initialize: center=(%g, %g) width=%g momentum=(%g, %g) dx=%g N=%d L=%g",
                     x0, y0, sigma, momentum_x, momentum_y, c.dx, N, L)

        x, y = P.coords(N, c.dx)
        amplitude = np.exp(-((x - x0)**2 + (y - y0)**2) / (4 * sigma * sigma))
        phase = (momentum_x * x + momentum_y * y) / c.hbar
        self.psi.data[:] = amplitude * np.exp(1j * phase)

        norm_before = normalize(self.psi)
        logger.debug("  norm before=%.6f after=%.6f", norm_before, self.total_probability())

        if c.potential_type is PotentialType.FREEHAND:
            # keep the packet out of painted walls
            self.psi.data *= np.exp(-FREEHAND_ATTENUATION * np.abs(self._potential))
            normalize(self.psi)

        self._time = 0.0

    def reset(self, center_x: Optional[float] = None, center_y: Optional[float] = None,
              width: Optional[float] = None, momentum_x: float = 0.0, momentum_y: float = 0.0):
        self.initialize(center_x, center_y, width, momentum_x, momentum_y)

    # ------------------------- evolution -------------------------

    def step(self):
        """One Strang-split step: V/2, FFT, T, IFFT, V/2."""
        with_potential = self.config.potential_type is not PotentialType.NONE
        if with_potential:
            self.fft.multiply(self.psi, self.potential_op)
        self.fft.forward(self.psi)
        self.fft.multiply(self.psi, self.kinetic_op)
        self.fft.inverse(self.psi)
        if with_potential:
            self.fft.multiply(self.psi, self.potential_op)
        self._time += self.config.dt_effective

    # ------------------------- measurement -------------------------

    def _weights(self, x: int, y: int) -> np.ndarray:
        c = self.config
        if not (0 <= x < c.grid_size and 0 <= y < c.grid_size):
            raise IndexError(f"cell ({x}, {y}) outside {c.grid_size}x{c.grid_size} grid")
        return detector_weights(c.grid_size, c.dx, x, y, c.measurement_radius * c.dx)

    def detection_probability(self, x: int, y: int) -> float:
        """Detector-weighted probability at cell (x, y), clamped to [0, 1]."""
        p = float(np.sum(self._weights(x, y) * self.psi.density()))
        return clamp(p, 0.0, 1.0)

    def measure(self, x: int, y: int, rng: Optional[np.random.Generator] = None) -> MeasurementResult:
        """Born-rule detection at cell (x, y) followed by the matching collapse."""
        probability = self.detection_probability(x, y)
        found = bool((rng or self.rng).random() < probability)
        if found:
            self.collapse_positive(x, y)
        else:
            self.collapse_negative(x, y)
        return MeasurementResult(found=found, probability=probability)

    def collapse_positive(self, x: int, y: int):
        """Particle found: project onto the detector response and renormalize."""
        self.psi.data *= self._weights(x, y)
        normalize(self.psi)

    def collapse_negative(self, x: int, y: int):
        """Particle not found: carve out the detector footprint and renormalize."""
        self.psi.data *= 1.0 - self._weights(x, y)
        normalize(self.psi)

    # ------------------------- accessors -------------------------

    def probability_at(self, x: int, y: int) -> float:
        return self.psi.magnitude_squared(x, y)

    def probability_density(self) -> np.ndarray:
        return self.psi.density().reshape(-1)

    def phase(self) -> np.ndarray:
        return self.psi.phases().reshape(-1)

    def total_probability(self) -> float:
        return self.psi.sum_of_squared_magnitudes()

    def time(self) -> float:
        return self._time

    def parameters(self) -> SimulationParameters:
        return self.config.snapshot(self._time)

    def potential(self) -> np.ndarray:
        v = self._potential.reshape(-1).view()
        v.flags.writeable = False
        return v

    def wavefunction(self) -> ComplexGrid:
        return self.psi

    @property
    def potential_type(self) -> PotentialType:
        return self.config.potential_type

    # ------------------------- mutators -------------------------

    def set_time_scale(self, time_scale: float):
        self.config.time_scale = time_scale
        self._check_stability()
        self._precompute_kinetic()
        self._precompute_potential_operator()

    def set_measurement_radius(self, multiplier: float):
        self.config.measurement_radius = clamp(multiplier, *MEASUREMENT_RADIUS_RANGE)

    def set_potential_type(self, kind: Union[PotentialType, str]):
        kind = PotentialType.parse(kind)
        self.config.potential_type = kind
        if kind is PotentialType.FREEHAND:
            self.clear_freehand_potential()
        else:
            self._precompute_potential()
            self._precompute_potential_operator()

    def set_potential_strength_scale(self, scale: float):
        self.config.potential_strength_scale = clamp(scale, *STRENGTH_SCALE_RANGE)
        self._precompute_potential()
        self._precompute_potential_operator()

    def set_filter_enabled(self, enabled: bool):
        self.config.filter_enabled = bool(enabled)
        self._precompute_kinetic()

    # ------------------------- freehand potential -------------------------

    def add_potential_at(self, gx: int, gy: int, strength: float, radius: float):
        """Paint a Gaussian bump; call finalize_potential_changes() when done."""
        c = self.config
        if not (0 <= gx < c.grid_size and 0 <= gy < c.grid_size):
            raise IndexError(f"cell ({gx}, {gy}) outside {c.grid_size}x{c.grid_size} grid")
        self._potential += P.gaussian_brush(c.grid_size, c.dx, gx, gy, strength, radius)

    def finalize_potential_changes(self):
        self._precompute_potential_operator()

    def clear_freehand_potential(self):
        self._potential.fill(0.0)
        self._precompute_potential_operator()

    def set_base_potential(self, value: float = 0.0):
        self._potential.fill(value)
        self._precompute_potential_operator()
