"""Primary electron generation: test electron, electron gun, tritium decay, point source.

Energies are in keV, lengths in mm.
"""

from __future__ import annotations

import bisect
import dataclasses
import math
import random
from dataclasses import dataclass
from typing import Callable

from qtnmsim import beta

_GUN_OFFSET = 10.0  # electron gun sits 1 cm inside the world's lower face [mm]


class BetaSpectrum:
    """Tritium beta-decay energy density for fixed neutrino parameters."""

    def __init__(
        self, normal_order: bool, munu: float, m_sterile: float, eta: float
    ) -> None:
        self.normal_order = normal_order
        self.munu = munu
        self.m_sterile = m_sterile
        self.eta = eta

    def __call__(self, energy: float) -> float:
        return beta.dgamma_de(
            self.normal_order, self.munu, self.m_sterile, self.eta, energy
        )


class PiecewiseLinearDistribution:
    """Distribution whose density is linear between evenly spaced boundaries."""

    def __init__(
        self,
        bins: int,
        lower: float,
        upper: float,
        density: Callable[[float], float],
    ) -> None:
        if not upper > lower:
            raise ValueError("upper bound must exceed lower bound")
        bins = max(int(bins), 1)
        width = (upper - lower) / bins
        self.boundaries = tuple(lower + k * width for k in range(bins + 1))
        self.densities = tuple(float(density(b)) for b in self.boundaries)
        if any(not d >= 0.0 for d in self.densities):
            raise ValueError("densities must be non-negative numbers")

        self._cumulative: list[float] = []
        total = 0.0
        for left, right, d_left, d_right in zip(
            self.boundaries,
            self.boundaries[1:],
            self.densities,
            self.densities[1:],
        ):
            total += 0.5 * (d_left + d_right) * (right - left)
            self._cumulative.append(total)
        if total <= 0.0:
            raise ValueError("density integrates to zero")
        self._total = total

    def sample(self, rng: random.Random) -> float:
        """Draw one value using the given random source."""
        target = rng.random() * self._total
        index = min(bisect.bisect_right(self._cumulative, target), len(self._cumulative) - 1)
        previous = self._cumulative[index - 1] if index > 0 else 0.0
        area = self._cumulative[index] - previous
        u = min(max((target - previous) / area, 0.0), 1.0)

        left = self.boundaries[index]
        width = self.boundaries[index + 1] - left
        d_left = self.densities[index]
        d_right = self.densities[index + 1]
        root = math.sqrt(d_left * d_left + (d_right * d_right - d_left * d_left) * u)
        return left + width * u * (d_left + d_right) / (d_left + root)


@dataclass(frozen=True)
class GeneratorSettings:
    """User-controllable generator parameters and their permitted ranges."""

    test_electron: bool = False
    electron_gun: bool = False
    tritium: bool = False
    gun_energy: float = 18.575  # mean gun energy [keV]
    gun_width: float = 5.0e-4  # gun energy standard deviation [keV]
    gun_spot: float = 0.5  # gun spot diameter [mm]
    normal_order: bool = True
    numass: float = 1.0e-4  # lightest neutrino mass [keV]
    sterile_mass: float = 0.0  # [keV]
    sterile_mixing: float = 0.0
    tritium_bins: int = 10_000
    tritium_lower: float = 1.5  # lower bound of sampled beta energy [keV]

    def __post_init__(self) -> None:
        checks = {
            "gun_energy": self.gun_energy >= 1.0,
            "gun_width": self.gun_width >= 0.0,
            "gun_spot": self.gun_spot >= 0.0,
            "numass": self.numass >= 0.0,
            "sterile_mass": self.sterile_mass >= 0.0,
            "sterile_mixing": self.sterile_mixing >= 0.0,
            "tritium_bins": self.tritium_bins >= 1,
        }
        for name, ok in checks.items():
            if not ok:
                raise ValueError(f"{name} out of range: {getattr(self, name)!r}")


@dataclass(frozen=True)
class PrimaryVertex:
    """A generated primary particle."""

    position: tuple[float, float, float]
    direction: tuple[float, float, float]
    energy: float
    particle: str = "e-"


class PrimaryGenerator:
    """Produces one primary electron per call according to the settings."""

    def __init__(
        self,
        settings: GeneratorSettings | None = None,
        world_half_z: float | None = None,
        source_radius: float | None = None,
        source_half_z: float | None = None,
        seed: int | None = None,
    ) -> None:
        self.settings = settings if settings is not None else GeneratorSettings()
        self.world_half_z = world_half_z
        self.source_radius = source_radius
        self.source_half_z = source_half_z
        self.rng = random.Random(seed)
        self._point_source_energy = self.settings.gun_energy
        self._distribution: PiecewiseLinearDistribution | None = None

    def update(self, **kwargs) -> None:
        """Change settings; invalid values raise and leave settings untouched."""
        self.settings = dataclasses.replace(self.settings, **kwargs)
        self._distribution = None

    def tritium_distribution(self) -> PiecewiseLinearDistribution:
        """Beta energy distribution from the lower bound to the endpoint."""
        if self._distribution is None:
            s = self.settings
            upper = beta.endpoint_atomic(s.numass, 1)
            self._distribution = PiecewiseLinearDistribution(
                s.tritium_bins,
                s.tritium_lower,
                upper,
                BetaSpectrum(s.normal_order, s.numass, s.sterile_mass, s.sterile_mixing),
            )
        return self._distribution

    def generate(self) -> PrimaryVertex:
        """Generate one primary vertex."""
        s = self.settings
        if s.test_electron:
            return PrimaryVertex((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), s.gun_energy)
        if s.electron_gun:
            return self._electron_gun()
        if s.tritium:
            return self._tritium_decay()
        return PrimaryVertex((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), self._point_source_energy)

    def _electron_gun(self) -> PrimaryVertex:
        if self.world_half_z is None:
            raise ValueError("electron gun needs the world half length")
        s = self.settings
        x, y = self._point_in_disk(s.gun_spot / 2.0)
        energy = self.rng.gauss(s.gun_energy, s.gun_width)
        position = (x, y, -self.world_half_z + _GUN_OFFSET)
        return PrimaryVertex(position, (0.0, 0.0, 1.0), energy)

    def _tritium_decay(self) -> PrimaryVertex:
        if self.source_radius is None or self.source_half_z is None:
            raise ValueError("tritium source needs the gas cylinder dimensions")
        distribution = self.tritium_distribution()
        phi = 2.0 * math.pi * self.rng.random()
        rad = self.rng.random() * self.source_radius
        zpos = -self.source_half_z + 2.0 * self.source_half_z * self.rng.random()
        position = (rad * math.cos(phi), rad * math.sin(phi), zpos)
        direction = self._random_direction()
        return PrimaryVertex(position, direction, distribution.sample(self.rng))

    def _point_in_disk(self, radius: float) -> tuple[float, float]:
        if radius == 0.0:
            return 0.0, 0.0
        while True:
            x = (2.0 * self.rng.random() - 1.0) * radius
            y = (2.0 * self.rng.random() - 1.0) * radius
            if x * x + y * y <= radius * radius:
                return x, y

    def _random_direction(self) -> tuple[float, float, float]:
        cos_theta = 2.0 * self.rng.random() - 1.0
        sin_theta = math.sqrt(max(0.0, 1.0 - cos_theta * cos_theta))
        phi = 2.0 * math.pi * self.rng.random()
        return (sin_theta * math.cos(phi), sin_theta * math.sin(phi), cos_theta)