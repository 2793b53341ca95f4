"""Tritium beta-decay spectrum with atomic, radiative and nuclear corrections.

Energies are in keV and masses in keV unless stated otherwise. References
in the docstrings: [1] arXiv 1806.00369, [2] PRL 5(85) 807.
"""

from __future__ import annotations

import cmath
import math
from typing import Callable

PI = math.pi
TWOPI = 2.0 * PI
ME = 510.99895  # electron mass [keV]
GA = 1.2646  # nucleon axial coupling
GAQ = 1.24983  # quenched gA
GV = 1.0  # nucleon vector coupling
MTR = 2808920.8205  # bare nuclear tritium mass [keV]
MF = 2808391.2193  # bare nuclear 3He+ mass [keV]
ALPHA = 7.2973525693e-3  # fine structure constant
GF = 1.1663787e-17  # Fermi interaction strength [keV^-2]
RN = 2.884e-3  # nuclear radius of 3He [me]
KEV_INV_SEC = 1.52e18  # conversion [keV s]
SEC_YEAR = 60 * 60 * 24 * 365.25  # conversion [s/yr]
RYD = 13.605693122994e-3  # Rydberg energy [keV]
VUD = 0.97425  # CKM matrix element
MAT = MTR + ME - RYD  # atomic tritium mass including binding energy

# PMNS first row squared mixing elements
S12 = 0.297
S13_NO = 0.0215
S13_IO = 0.0216
UE_SQ_NO = ((1.0 - S12) * (1.0 - S13_NO), S12 * (1.0 - S13_NO), S13_NO)
UE_SQ_IO = ((1.0 - S12) * (1.0 - S13_IO), S12 * (1.0 - S13_IO), S13_IO)

# Squared mass differences [keV^2]
DM21_SQ = 7.42e-11
DM31_SQ = 2.517e-9
DM32_SQ = -2.498e-9

_LANCZOS_G = 7.0
_LANCZOS_P = (
    0.99999999999980993,
    676.5203681218851,
    -1259.1392167224028,
    771.32342877765313,
    -176.61502916214059,
    12.507343278686905,
    -0.13857109526572012,
    9.9843695780195716e-6,
    1.5056327351493116e-7,
)

_MIN_ENERGY = 0.04  # lower clamp for electron energy [keV]


def heaviside(x: float) -> float:
    """Step function with value 0.5 at the origin."""
    if x > 0.0:
        return 1.0
    if x == 0.0:
        return 0.5
    return 0.0


def complex_gamma(z: complex) -> complex:
    """Gamma function for complex argument by the Lanczos approximation."""
    z = complex(z)
    if z.real < 0.5:
        return PI / (cmath.sin(PI * z) * complex_gamma(1.0 - z))
    z -= 1.0
    x = complex(_LANCZOS_P[0])
    for i, coeff in enumerate(_LANCZOS_P[1:], start=1):
        x += coeff / (z + i)
    t = z + _LANCZOS_G + 0.5
    return math.sqrt(TWOPI) * t ** (z + 0.5) * cmath.exp(-t) * x


def simpson_integrate(
    func: Callable[[float], float], start: float, stop: float, steps: int
) -> float:
    """Composite Simpson integral of ``func`` over [start, stop]."""
    h = (stop - start) / steps
    total = 0.0
    for i in range(steps):
        left = start + h * i
        total += (func(left) + 4.0 * func(left + h / 2.0) + func(left + h)) / 6.0
    return h * total


def endpoint(munu: float) -> float:
    """Three-body endpoint energy of bare tritium for neutrino mass munu."""
    msum2 = (MF + munu) ** 2
    return (MTR * MTR + ME * ME - msum2) / (2.0 * MTR) - ME


def helium_atomic_mass(n: int) -> float:
    """Atomic 3He mass with the n-th level binding; n below 1 counts as 1."""
    n = max(n, 1)
    return MF + ME - 4.0 * RYD / (n * n)


def endpoint_atomic(munu: float, n: int) -> float:
    """Endpoint energy of atomic tritium decaying to 3He level n."""
    msum2 = (helium_atomic_mass(n) + munu) ** 2
    return (MAT * MAT + ME * ME - msum2) / (2.0 * MAT) - ME


def fermi_function(z: int, beta: float) -> float:
    """Fermi function approximation [1] (A.2)."""
    eta = ALPHA * z / beta
    nom = TWOPI * eta * (1.002037 - 0.001427 * beta)
    denom = 1.0 - math.exp(-TWOPI * eta)
    return nom / denom


def radiative_correction(en: float, endp: float) -> float:
    """Radiative correction [1] (A.3)."""
    if endp <= en:
        return 0.0
    en = max(en, _MIN_ENERGY)
    w = (en + ME) / ME
    w0 = (endp + ME) / ME
    p = math.sqrt(w * w - 1.0)
    beta = p / w
    t = math.atanh(beta) / beta - 1.0
    fac1 = math.pow(w0 - w, 2.0 * ALPHA * t / PI)
    fac2 = 2.0 * ALPHA / PI
    term1 = t * (math.log(2.0) - 1.5 + (w0 - w) / w)
    term2 = (t + 1.0) / 4.0 * (
        2.0 * (1.0 + beta * beta)
        + 2.0 * math.log(1.0 - beta)
        + (w0 - w) ** 2 / (6.0 * w * w)
    )
    return fac1 * (
        1.0
        + fac2
        * (
            term1
            + term2
            - 2.0
            + beta / 2.0
            - 17.0 / 36.0 * beta * beta
            + 5.0 / 6.0 * beta**3
        )
    )


def screening_correction(z: int, en: float) -> float:
    """Orbital electron shielding [1] (A.4)."""
    en = max(en, _MIN_ENERGY)
    v0 = 1.45 * ALPHA * ALPHA * ME
    w = (en + ME) / ME
    p = math.sqrt(w * w - 1.0)
    wb = w - v0 / ME
    pb = math.sqrt(wb * wb - 1.0)
    eta = ALPHA * z * w / p
    etab = ALPHA * z * wb / pb
    gamma = math.sqrt(1.0 - ALPHA * ALPHA * z * z)
    fac1 = wb / w * math.pow(pb / p, -1.0 + 2.0 * gamma)
    nom = abs(complex_gamma(complex(gamma, etab))) ** 2
    denom = abs(complex_gamma(complex(gamma, eta))) ** 2
    return fac1 * math.exp(PI * (etab - eta)) * nom / denom


def finite_size_correction(z: int, en: float) -> float:
    """Scaling of the electric field within the nucleus [1] (A.7)."""
    w = (en + ME) / ME
    fac = ALPHA * z
    gamma = math.sqrt(1.0 - fac * fac)
    term1 = w * RN * fac / 15.0 * (41.0 - 26.0 * gamma) / (2.0 * gamma - 1.0)
    term2 = fac * RN * gamma / (30.0 * w) * (17.0 - 2.0 * gamma) / (2.0 * gamma - 1.0)
    return 1.0 + 13.0 / 60.0 * fac * fac - term1 - term2


def convolution_correction(z: int, en: float, endp: float) -> float:
    """Convolution of lepton wavefunctions within the nucleus [1] (A.8)."""
    if endp <= en:
        return 1.0
    w = (en + ME) / ME
    w0 = (endp + ME) / ME
    fac = ALPHA * z
    c0 = (
        -233.0 / 630.0 * fac * fac
        - 1.0 / 5.0 * w0 * w0 * RN * RN
        + 2.0 / 35.0 * w0 * RN * fac
    )
    c1 = -21.0 / 35.0 * RN * fac + 4.0 / 9.0 * w0 * RN * RN
    c2 = -4.0 / 9.0 * RN * RN
    return 1.0 + c0 + c1 * w + c2 * w * w


def recoil_correction(z: int, en: float, endp: float) -> float:
    """Recoiling nuclear charge field [1] (A.9)."""
    if endp <= en:
        return 1.0
    en = max(en, _MIN_ENERGY)
    mcc = 5497.885
    lt = 1.265
    w = (en + ME) / ME
    w0 = (endp + ME) / ME
    p = math.sqrt(w * w - 1.0)
    fac = PI * ALPHA * z / (mcc * p)
    return 1.0 - fac * (1.0 + (1.0 - lt * lt) / (1.0 + 3.0 * lt * lt) * (w0 - w) / (3.0 * w))


def _corrections(en: float, e0: float) -> float:
    beta = math.sqrt((en + ME) ** 2 - ME * ME) / (en + ME)
    return (
        fermi_function(2, beta)
        * screening_correction(2, en)
        * radiative_correction(en, e0)
        * finite_size_correction(2, en)
        * convolution_correction(2, en, e0)
        * recoil_correction(2, en, e0)
    )


def total_correction(en: float, munu: float, n: int) -> float:
    """Combined correction factor for atomic tritium decaying to level n."""
    e0 = endpoint_atomic(munu, n)
    if e0 <= en:
        return 1.0
    return _corrections(en, e0)


def rate_kernel(en: float, munu: float, e0: float) -> float:
    """Uncorrected differential rate for electron energy en and endpoint e0."""
    if e0 < en:
        return 0.0
    fac1 = (GF * GF * VUD * VUD) / (2.0 * PI**3)
    denom = MTR * MTR - 2.0 * MTR * (en + ME) + ME * ME
    nom1 = MTR * (en + ME) - ME * ME
    nom2 = (en + ME) ** 2 - ME * ME
    fac2 = MTR * MTR * math.sqrt(nom2) / denom
    fac3 = math.sqrt((e0 - en) * (e0 - en + 2.0 * munu * MF / MTR))
    fac4 = (GV + GAQ) ** 2
    fac5 = MTR * (MTR - en - ME) / denom
    fac6 = (e0 - en + (munu * (munu + MF) / MTR)) * nom1 / denom
    fac7 = e0 - en + (MF * (munu + MF) / MTR)
    term = -1.0 / 3.0 * (
        MTR * MTR * nom2 / (denom * denom) * (e0 - en) * (e0 - en + 2.0 * munu * MF / MTR)
    )
    term1 = fac2 * fac3 * (fac4 * fac5 * fac6 * fac7 + term)
    fac8 = (GV - GAQ) ** 2
    term2 = fac8 * (en + ME) * (e0 - en + munu * MF / MTR)
    fac9 = GAQ * GAQ - GV * GV
    term3 = fac9 * MF * fac6
    return fac1 * (term1 + term2 + term3)


def diff(en: float, munu: float, n: int) -> float:
    """Corrected differential rate for one neutrino mass and 3He level n."""
    e0 = endpoint_atomic(munu, n)
    return rate_kernel(en, munu, e0) * total_correction(en, munu, n)


def nu_spectrum(normal_order: bool, munu: float) -> tuple[float, float, float]:
    """Three light neutrino masses given the lightest mass munu."""
    if normal_order:
        return (
            munu,
            math.sqrt(munu * munu + DM21_SQ),
            math.sqrt(munu * munu + DM31_SQ),
        )
    return (
        math.sqrt(munu * munu - DM21_SQ - DM32_SQ),
        math.sqrt(munu * munu - DM32_SQ),
        munu,
    )


def _weights(normal_order: bool) -> tuple[float, float, float]:
    return UE_SQ_NO if normal_order else UE_SQ_IO


def diff_3nu(normal_order: bool, en: float, munu: float, n: int) -> float:
    """Differential rate summed over the three light neutrinos."""
    masses = nu_spectrum(normal_order, munu)
    return sum(
        weight * diff(en, mass, n)
        for weight, mass in zip(_weights(normal_order), masses)
    )


def diff_4nu(
    normal_order: bool, m_sterile: float, eta: float, en: float, munu: float, n: int
) -> float:
    """Differential rate with three light and one sterile neutrino."""
    e0 = endpoint_atomic(m_sterile, n)
    return (1.0 - eta * eta) * diff_3nu(normal_order, en, munu, n) + eta * eta * diff(
        en, m_sterile, n
    ) * heaviside(e0 - en)


def eta_l(en: float) -> float:
    """Sommerfeld-like parameter for the atomic level branching [2]."""
    denom = (en + ME) ** 2 - ME * ME
    return -2.0 * ALPHA * ME / math.sqrt(denom)


def a_l(en: float) -> float:
    """Energy-dependent amplitude entering the level branching [2]."""
    eta = eta_l(en)
    nom = math.exp(2.0 * eta * math.atan(-2.0 / eta))
    denom = (1.0 + eta * eta / 4.0) ** 2
    return eta**4 * nom / denom


def level_probability(n: int, en: float) -> float:
    """Branching weight of the 3He level n at electron energy en [2]."""
    al = a_l(en)
    if n == 2:
        return 0.25 * (1.0 + al * al - al)
    nf = float(n)
    term1 = 256.0 * nf**5 * (nf - 2.0) ** (2.0 * nf - 4.0) / (nf + 2.0) ** (2.0 * nf + 4.0)
    term2 = al * al / nf**3 - 16.0 * nf * al * (nf - 2.0) ** (nf - 2.0) / (nf + 2.0) ** (
        nf + 2.0
    )
    return 2.0 * (term1 + term2)


def dgamma_de(
    normal_order: bool, munu: float, m_sterile: float, eta: float, en: float
) -> float:
    """Full differential rate over the first five bound 3He levels."""
    return sum(
        level_probability(n, en) * diff_4nu(normal_order, m_sterile, eta, en, munu, n)
        for n in range(1, 6)
    )


def endpoint_continuum(munu: float, n: float) -> float:
    """Endpoint for a continuum orbital state labelled by a real n."""
    return endpoint_atomic(munu, 1) - 4.0 * RYD * (1.0 + 1.0 / (n * n))


def correction_continuum(en: float, munu: float, n: float) -> float:
    """Combined correction factor for a continuum state."""
    return _corrections(en, endpoint_continuum(munu, n))


def diff_continuum(en: float, munu: float, n: float) -> float:
    """Corrected differential rate for a continuum state."""
    e0 = endpoint_continuum(munu, n)
    return rate_kernel(en, munu, e0) * correction_continuum(en, munu, n)


def continuum_integrand(g: float, en: float, munu: float) -> float:
    """Integrand over continuum states g."""
    fac1 = diff_continuum(en, munu, g) * TWOPI / (g**3 * (math.exp(TWOPI * g) - 1.0))
    fac2 = g**4 * math.exp(2.0 * g * math.atan(-2.0 / g)) / (1.0 + g * g / 4.0) ** 2
    al = a_l(en)
    return fac1 * (fac2 * fac2 + al * al - al * fac2)


def gamma_continuum(en: float, munu: float) -> float:
    """Contribution from the continuum orbital electron states only."""
    if en > endpoint_continuum(munu, 1e10):
        return 0.0
    integral = simpson_integrate(
        lambda g: continuum_integrand(g, en, munu), -99.0, eta_l(en), 1000
    )
    return integral / PI


def dgamma_de_continuum(
    normal_order: bool, munu: float, m_sterile: float, eta: float, en: float
) -> float:
    """Continuum contribution summed over light and sterile neutrinos."""
    masses = nu_spectrum(normal_order, munu)
    total = sum(
        weight * gamma_continuum(en, mass)
        for weight, mass in zip(_weights(normal_order), masses)
    )
    return (1.0 - eta * eta) * total + eta * eta * gamma_continuum(en, m_sterile)


def dgamma_de_full(
    normal_order: bool, munu: float, m_sterile: float, eta: float, en: float
) -> float:
    """Bound plus continuum differential decay rate."""
    return dgamma_de(normal_order, munu, m_sterile, eta, en) + dgamma_de_continuum(
        normal_order, munu, m_sterile, eta, en
    )