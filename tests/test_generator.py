import math
import random

import pytest

from qtnmsim import beta
from qtnmsim.generator import (
    BetaSpectrum,
    GeneratorSettings,
    PiecewiseLinearDistribution,
    PrimaryGenerator,
)


def test_beta_spectrum_matches_rate():
    spectrum = BetaSpectrum(True, 1e-4, 0.0, 0.0)
    assert spectrum(10.0) == beta.dgamma_de(True, 1e-4, 0.0, 0.0, 10.0)
    assert spectrum(10.0) > 0.0


def test_beta_spectrum_zero_beyond_endpoint():
    spectrum = BetaSpectrum(True, 1e-4, 0.0, 0.0)
    end = beta.endpoint_atomic(1e-4, 1)
    assert spectrum(end + 1.0) == 0.0


def test_distribution_boundaries():
    dist = PiecewiseLinearDistribution(4, 0.0, 1.0, lambda x: 1.0)
    assert len(dist.boundaries) == 5
    assert dist.boundaries[0] == 0.0
    assert dist.boundaries[-1] == pytest.approx(1.0)
    assert dist.densities == (1.0,) * 5


def test_uniform_distribution_samples():
    dist = PiecewiseLinearDistribution(10, 2.0, 4.0, lambda x: 1.0)
    rng = random.Random(3)
    samples = [dist.sample(rng) for _ in range(5000)]
    assert all(2.0 <= s <= 4.0 for s in samples)
    assert sum(samples) / len(samples) == pytest.approx(3.0, abs=0.05)


def test_distribution_respects_zero_density():
    dist = PiecewiseLinearDistribution(4, 0.0, 1.0, lambda x: 0.0 if x <= 0.5 else 1.0)
    rng = random.Random(5)
    samples = [dist.sample(rng) for _ in range(2000)]
    assert min(samples) >= 0.5
    assert max(samples) <= 1.0


def test_distribution_rejects_bad_input():
    with pytest.raises(ValueError):
        PiecewiseLinearDistribution(4, 0.0, 1.0, lambda x: -1.0)
    with pytest.raises(ValueError):
        PiecewiseLinearDistribution(4, 0.0, 1.0, lambda x: 0.0)
    with pytest.raises(ValueError):
        PiecewiseLinearDistribution(4, 1.0, 1.0, lambda x: 1.0)


def test_point_source_default():
    vertex = PrimaryGenerator(seed=1).generate()
    assert vertex.position == (0.0, 0.0, 0.0)
    assert vertex.direction == (1.0, 0.0, 0.0)
    assert vertex.energy == pytest.approx(18.575)
    assert vertex.particle == "e-"


def test_test_electron_overrides_other_guns():
    settings = GeneratorSettings(test_electron=True, electron_gun=True, gun_energy=30.0)
    vertex = PrimaryGenerator(settings, world_half_z=100.0, seed=1).generate()
    assert vertex.position == (0.0, 0.0, 0.0)
    assert vertex.direction == (1.0, 0.0, 0.0)
    assert vertex.energy == 30.0


def test_electron_gun():
    settings = GeneratorSettings(electron_gun=True, gun_spot=2.0, gun_width=0.01)
    gen = PrimaryGenerator(settings, world_half_z=100.0, seed=2)
    vertices = [gen.generate() for _ in range(500)]
    for v in vertices:
        x, y, z = v.position
        assert math.hypot(x, y) <= 1.0
        assert z == pytest.approx(-90.0)
        assert v.direction == (0.0, 0.0, 1.0)
    mean = sum(v.energy for v in vertices) / len(vertices)
    assert mean == pytest.approx(settings.gun_energy, abs=0.005)


def test_electron_gun_needs_world():
    gen = PrimaryGenerator(GeneratorSettings(electron_gun=True))
    with pytest.raises(ValueError):
        gen.generate()


def test_same_seed_same_output():
    settings = GeneratorSettings(electron_gun=True)
    a = PrimaryGenerator(settings, world_half_z=50.0, seed=7)
    b = PrimaryGenerator(settings, world_half_z=50.0, seed=7)
    assert [a.generate() for _ in range(5)] == [b.generate() for _ in range(5)]


def test_settings_validation():
    with pytest.raises(ValueError):
        GeneratorSettings(gun_energy=0.5)
    with pytest.raises(ValueError):
        GeneratorSettings(sterile_mixing=-0.1)


def test_update_invalid_keeps_settings():
    gen = PrimaryGenerator(seed=1)
    with pytest.raises(ValueError):
        gen.update(gun_width=-1.0)
    assert gen.settings.gun_width == GeneratorSettings().gun_width
    gen.update(gun_energy=25.0, test_electron=True)
    assert gen.generate().energy == 25.0


def test_tritium_decay():
    settings = GeneratorSettings(tritium=True, tritium_bins=20)
    gen = PrimaryGenerator(settings, source_radius=5.0, source_half_z=10.0, seed=11)
    upper = beta.endpoint_atomic(settings.numass, 1)
    dist = gen.tritium_distribution()
    assert dist.boundaries[0] == settings.tritium_lower
    assert dist.boundaries[-1] == pytest.approx(upper)
    for _ in range(50):
        v = gen.generate()
        x, y, z = v.position
        assert math.hypot(x, y) <= 5.0
        assert -10.0 <= z <= 10.0
        assert sum(c * c for c in v.direction) == pytest.approx(1.0)
        assert settings.tritium_lower <= v.energy <= upper


def test_tritium_needs_source_geometry():
    gen = PrimaryGenerator(GeneratorSettings(tritium=True, tritium_bins=2))
    with pytest.raises(ValueError):
        gen.generate()