"""Magnetic bathtub trap: two circular current loops on a uniform background.

All quantities are SI: positions in metres, currents in amperes and fields
in tesla.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

MU0 = 4.0e-7 * math.pi  # vacuum permeability [T m / A]

_AXIS_TOLERANCE = 1e-10


def _agm_terms(k: float) -> tuple[float, float]:
    """Return the arithmetic-geometric mean of 1 and k' and the E-series sum."""
    if abs(k) > 1.0:
        raise ValueError(f"elliptic modulus must satisfy |k| <= 1, got {k}")
    a = 1.0
    b = math.sqrt(1.0 - k * k)
    power = 0.5
    total = power * k * k
    while abs(a - b) > 1e-15 * a:
        c = (a - b) / 2.0
        a, b = (a + b) / 2.0, math.sqrt(a * b)
        power *= 2.0
        total += power * c * c
    return a, total


def complete_elliptic_k(k: float) -> float:
    """Complete elliptic integral of the first kind for modulus k."""
    if abs(k) == 1.0:
        return math.inf
    mean, _ = _agm_terms(k)
    return math.pi / (2.0 * mean)


def complete_elliptic_e(k: float) -> float:
    """Complete elliptic integral of the second kind for modulus k."""
    if abs(k) == 1.0:
        return 1.0
    mean, total = _agm_terms(k)
    return math.pi / (2.0 * mean) * (1.0 - total)


class MagneticTrap:
    """Uniform field plus two coaxial current loops at z = +coil_z and -coil_z.

    With ``coil_z`` equal to zero a single loop in the z = 0 plane is used,
    giving a harmonic trap.
    """

    def __init__(
        self,
        field_vector: Sequence[float] = (0.0, 0.0, 0.0),
        current: float = 1.0,
        radius: float = 0.02,
        coil_z: float = 0.02,
    ) -> None:
        self.set_field_value(field_vector)
        self.current = float(current)
        self.set_radius(radius)
        self.coil_z = float(coil_z)

    def set_field_value(self, field_vector: Sequence[float]) -> None:
        """Replace the uniform background field."""
        bx, by, bz = field_vector
        self.background = (float(bx), float(by), float(bz))

    def set_current(self, current: float) -> None:
        """Set the coil current [A]."""
        self.current = float(current)

    def set_radius(self, radius: float) -> None:
        """Set the coil radius [m]."""
        if radius <= 0.0:
            raise ValueError(f"coil radius must be positive, got {radius}")
        self.radius = float(radius)

    def set_coil_z(self, coil_z: float) -> None:
        """Set the axial coil position; coils sit at +coil_z and -coil_z."""
        self.coil_z = float(coil_z)

    def central_field(self) -> float:
        """Field magnitude at the centre of a single loop [T]."""
        return self.current * MU0 / self.radius / 2.0

    def coil_field(
        self, point: Sequence[float], zfactor: float
    ) -> tuple[float, float, float]:
        """Field of the loop at z = zfactor * coil_z at the given point."""
        x, y, z = point[0], point[1], point[2]
        rad = math.hypot(x, y)

        if rad / self.radius < _AXIS_TOLERANCE:
            radius2 = self.radius**2
            bz = (
                MU0
                * self.current
                * radius2
                / (2.0 * (radius2 + (zfactor * self.coil_z - z) ** 2) ** 1.5)
            )
            return 0.0, 0.0, bz

        z_rel = z - zfactor * self.coil_z
        rad_norm = rad / self.radius
        rad_norm2 = rad_norm**2
        z_norm2 = (z_rel / self.radius) ** 2

        alpha = (1.0 + rad_norm) ** 2 + z_norm2
        root_alpha_pi = math.sqrt(alpha) * math.pi
        root_beta = math.sqrt(4.0 * rad_norm / alpha)

        int_e = complete_elliptic_e(root_beta)
        int_k = complete_elliptic_k(root_beta)

        b_central = self.central_field()
        gamma = alpha - 4.0 * rad_norm
        b_r = (
            b_central
            * (int_e * ((1.0 + rad_norm2 + z_norm2) / gamma) - int_k)
            / root_alpha_pi
            * (z_rel / rad)
        )
        b_z = (
            b_central
            * (int_e * ((1.0 - rad_norm2 - z_norm2) / gamma) + int_k)
            / root_alpha_pi
        )
        return b_r * x / rad, b_r * y / rad, b_z

    def field_value(
        self, point: Sequence[float]
    ) -> tuple[float, float, float, float, float, float]:
        """Magnetic and (zero) electric field components at the point."""
        fx, fy, fz = self.coil_field(point, 1.0)
        bx = self.background[0] + fx
        by = self.background[1] + fy
        bz = self.background[2] + fz
        if self.coil_z != 0.0:
            gx, gy, gz = self.coil_field(point, -1.0)
            bx += gx
            by += gy
            bz += gz
        return bx, by, bz, 0.0, 0.0, 0.0