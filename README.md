# qtnmsim

Physics building blocks for simulating electrons from tritium beta decay in a
magnetic trap. The package has no dependencies beyond the standard library.

## Modules

- `qtnmsim.beta` – the differential tritium beta-decay rate in keV units:
  Fermi function, radiative, screening, finite-size, convolution and recoil
  corrections; three light neutrinos with normal or inverted ordering
  (`nu_spectrum`, `diff_3nu`); an optional sterile neutrino with mixing `eta`
  (`diff_4nu`); the first five bound levels of the daughter ion
  (`dgamma_de`); the continuum states (`dgamma_de_continuum`); and both
  together (`dgamma_de_full`). Helpers include `endpoint`, `endpoint_atomic`,
  `complex_gamma` (Lanczos) and `simpson_integrate`.
- `qtnmsim.magnetic_trap` – `MagneticTrap`, a uniform background field plus
  two coaxial current loops at `+coil_z` and `-coil_z` (a single loop when
  `coil_z` is 0), evaluated with `complete_elliptic_k` and
  `complete_elliptic_e`. All quantities are SI: metres, amperes, tesla.
- `qtnmsim.generator` – `PrimaryGenerator` produces one `PrimaryVertex`
  (position in mm, unit direction, energy in keV) per call: a test electron
  along x, an electron gun with a Gaussian energy spread and a circular spot,
  tritium decays drawn from the beta spectrum inside a gas cylinder, or
  otherwise a mono-energetic point source. Options live in the frozen
  `GeneratorSettings` dataclass, which checks their ranges;
  `PiecewiseLinearDistribution` does the spectrum sampling.
- `qtnmsim.output` – `GasHit` records and `OutputManager`, which books a
  `Score` ntuple (hits) and a `Signal` ntuple (per-track time series: antenna
  id, time, voltage, angular frequency, kinetic energy) and writes them as a
  JSON document. A file name without a suffix gets `.json`.
- `qtnmsim.process_stream` – `ProcessStream` reads the combined stdout and
  stderr of a started program as a raw binary stream; `GzipStream` reads a
  gzip-compressed file through `gzip -q -d -c`.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Examples

Differential decay rate at 18.5 keV for a 0.1 eV lightest neutrino, normal
ordering, no sterile neutrino:

```python
from qtnmsim import beta

rate = beta.dgamma_de(True, 1.0e-4, 0.0, 0.0, 18.5)
e_max = beta.endpoint_atomic(1.0e-4, 1)   # keV
```

Field of a bathtub trap (SI units): 1 T background along z, 1 A loops of
2 cm radius at z = ±2 cm:

```python
from qtnmsim.magnetic_trap import MagneticTrap

trap = MagneticTrap((0.0, 0.0, 1.0), current=1.0, radius=0.02, coil_z=0.02)
bx, by, bz = trap.field_value((0.001, 0.0, 0.005))[:3]
```

Generating primaries from the tritium spectrum (lengths in mm). The spectrum
is tabulated once at `tritium_bins + 1` energies, so a smaller value makes the
first draw quicker:

```python
from qtnmsim.generator import GeneratorSettings, PrimaryGenerator

gen = PrimaryGenerator(GeneratorSettings(tritium_bins=500), world_half_z=1000.0,
                       source_radius=10.0, source_half_z=50.0, seed=1)
gen.update(tritium=True)
vertex = gen.generate()
```

Collecting and writing ntuple rows:

```python
from qtnmsim.output import OutputManager

out = OutputManager("run1")         # written to run1.json
out.book()
out.fill_ntuple_int(0, 0, 1)        # Score: EventID
out.fill_ntuple_double(0, 2, 0.5)   # Score: Edep
out.add_ntuple_row(0)
out.fill_time(1.0)
out.fill_voltage(2.0e-6)
out.add_ntuple_row(1)               # Signal row takes the collected vectors
out.save()
```

After each row, the antenna, time, voltage and angular-frequency vectors are
cleared; the kinetic-energy vector is kept.

Reading a compressed file:

```python
from qtnmsim.process_stream import GzipStream

with GzipStream("data.gz") as stream:
    payload = stream.read()
```

## What this package does not do

There is no command-line program and no particle transport: the package does
not track electrons through the trap, compute antenna signals from
trajectories, or model scattering and ionisation. Output is JSON only; no
other file format is written.