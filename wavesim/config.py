# wavesim/config.py
from dataclasses import dataclass
from .potentials import PotentialType

DEFAULT_HBAR = 1.0
DEFAULT_MASS = 1.0
DEFAULT_WIDTH_CELLS = 3.0          # packet width in units of dx

DEFAULT_MEASUREMENT_RADIUS = 1.5   # detector sigma in units of dx
MEASUREMENT_RADIUS_RANGE = (0.5, 10.0)

DEFAULT_POTENTIAL_STRENGTH = 1.0
STRENGTH_SCALE_RANGE = (0.1, 10.0)

FREEHAND_ATTENUATION = 10.0        # psi *= exp(-a|V|) on initialize

BOUNDARY_CONDITIONS = ("periodic",)

def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))

@dataclass
class SimulationConfig:
    """Mutable settings owned by one QuantumSimulation."""
    grid_size: int
    dx: float
    dt: float
    hbar: float = DEFAULT_HBAR
    mass: float = DEFAULT_MASS
    boundary_condition: str = "periodic"
    time_scale: float = 1.0
    measurement_radius: float = DEFAULT_MEASUREMENT_RADIUS
    potential_type: PotentialType = PotentialType.NONE
    potential_strength: float = DEFAULT_POTENTIAL_STRENGTH
    potential_strength_scale: float = 1.0
    filter_enabled: bool = False

    @property
    def dt_effective(self) -> float:
        return self.dt * self.time_scale

    @property
    def domain_size(self) -> float:
        return self.grid_size * self.dx

    @property
    def stability_limit(self) -> float:
        return 2 * self.mass * self.dx * self.dx / self.hbar

    def is_stable(self) -> bool:
        return self.dt_effective < self.stability_limit

    def snapshot(self, time: float) -> "SimulationParameters":
        return SimulationParameters(
            grid_size=self.grid_size, dx=self.dx, dt=self.dt,
            dt_effective=self.dt_effective, hbar=self.hbar, mass=self.mass,
            boundary_condition=self.boundary_condition, time_scale=self.time_scale,
            domain_size=self.domain_size, time=time,
            measurement_radius=self.measurement_radius,
            potential_type=self.potential_type,
            potential_strength_scale=self.potential_strength_scale,
            filter_enabled=self.filter_enabled,
        )

@dataclass(frozen=True)
class SimulationParameters:
    grid_size: int
    dx: float
    dt: float
    dt_effective: float
    hbar: float
    mass: float
    boundary_condition: str
    time_scale: float
    domain_size: float
    time: float
    measurement_radius: float
    potential_type: PotentialType
    potential_strength_scale: float
    filter_enabled: bool
