"""Hit records and ntuple output written as a JSON document."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

SCORE_NTUPLE = 0
SIGNAL_NTUPLE = 1

_DEFAULT_SUFFIX = ".json"
_DIRECTORY = "ntuple"


@dataclass
class GasHit:
    """Energy deposit, kinetic energies, angles and position of one step in gas."""

    track_id: int = 0
    edep: float = 0.0
    time: float = 0.0
    pre_kine: float = 0.0
    post_kine: float = 0.0
    pre_theta: float = 0.0
    post_theta: float = 0.0
    posx: float = 0.0
    posy: float = 0.0
    posz: float = 0.0


@dataclass(frozen=True)
class _Column:
    name: str
    kind: str  # "I" for integers, "D" for doubles
    vector: bool = False

    def default(self):
        return 0 if self.kind == "I" else 0.0


@dataclass
class _Ntuple:
    name: str
    title: str
    columns: list[_Column]
    rows: list[dict] = field(default_factory=list)
    current: list = field(default_factory=list)

    def reset(self) -> None:
        self.current = [col.default() for col in self.columns]


def _score_columns() -> list[_Column]:
    names = ["Edep", "TimeStamp", "PreKine", "PostKine", "PreTheta",
             "PostTheta", "Posx", "Posy", "Posz"]
    return [_Column("EventID", "I"), _Column("TrackID", "I")] + [
        _Column(name, "D") for name in names
    ]


def _signal_columns() -> list[_Column]:
    scalars = ["Posx", "Posy", "Posz", "PitchAngle", "KinEnergy"]
    return (
        [_Column("EventID", "I"), _Column("TrackID", "I")]
        + [_Column(name, "D") for name in scalars]
        + [
            _Column("AntennaID", "I", vector=True),
            _Column("TimeVec", "D", vector=True),
            _Column("VoltageVec", "D", vector=True),
            _Column("OmVec", "D", vector=True),
            _Column("KEVec", "D", vector=True),
        ]
    )


class OutputManager:
    """Books the Score and Signal ntuples, collects rows and writes them out."""

    def __init__(self, filename: str) -> None:
        self.filename = filename
        self._booked = False
        self._file: TextIO | None = None
        self._ntuples: list[_Ntuple] = []
        self._vectors: dict[str, list] = {
            "AntennaID": [],
            "TimeVec": [],
            "VoltageVec": [],
            "OmVec": [],
            "KEVec": [],
        }

    @property
    def path(self) -> Path:
        """File the ntuples are written to; a missing suffix becomes .json."""
        path = Path(self.filename)
        return path if path.suffix else path.with_name(path.name + _DEFAULT_SUFFIX)

    @property
    def vectors(self) -> dict[str, list]:
        """Copies of the current time-series vectors, by column name."""
        return {name: list(values) for name, values in self._vectors.items()}

    def book(self) -> None:
        """Open the output file and create the ntuples on first use."""
        if self._file is None:
            self._file = open(self.path, "w", encoding="utf-8")
        if not self._booked:
            self._ntuples = [
                _Ntuple("Score", "Hits", _score_columns()),
                _Ntuple("Signal", "Time-series", _signal_columns()),
            ]
            for ntuple in self._ntuples:
                ntuple.reset()
            self._booked = True

    def save(self) -> None:
        """Write all rows, close the file and clear the stored rows."""
        if not self._booked:
            return
        if self._file is None:
            raise RuntimeError("no output file is open")
        document = {
            _DIRECTORY: {
                nt.name: {
                    "title": nt.title,
                    "columns": [
                        {"name": c.name, "type": c.kind, "vector": c.vector}
                        for c in nt.columns
                    ],
                    "rows": nt.rows,
                }
                for nt in self._ntuples
            }
        }
        try:
            json.dump(document, self._file, indent=1)
        finally:
            self._file.close()
            self._file = None
        for ntuple in self._ntuples:
            ntuple.rows = []
            ntuple.reset()

    def _ntuple(self, which: int) -> _Ntuple:
        if not self._booked:
            raise RuntimeError("ntuples are not booked")
        if not 0 <= which < len(self._ntuples):
            raise IndexError(f"no ntuple with id {which}")
        return self._ntuples[which]

    def _fill(self, which: int, col: int, val, kind: str) -> None:
        ntuple = self._ntuple(which)
        if not 0 <= col < len(ntuple.columns):
            raise IndexError(f"ntuple {which} has no column {col}")
        column = ntuple.columns[col]
        if column.vector or column.kind != kind:
            raise TypeError(f"column {column.name!r} does not take this value type")
        ntuple.current[col] = val

    def fill_ntuple_int(self, which: int, col: int, val: int) -> None:
        """Set an integer column of the current row."""
        if isinstance(val, bool) or not isinstance(val, int):
            raise TypeError(f"integer expected, got {val!r}")
        self._fill(which, col, val, "I")

    def fill_ntuple_double(self, which: int, col: int, val: float) -> None:
        """Set a floating-point column of the current row."""
        self._fill(which, col, float(val), "D")

    def fill_antenna(self, val: int) -> None:
        self._vectors["AntennaID"].append(int(val))

    def fill_time(self, val: float) -> None:
        self._vectors["TimeVec"].append(float(val))

    def fill_voltage(self, val: float) -> None:
        self._vectors["VoltageVec"].append(float(val))

    def fill_omega(self, val: float) -> None:
        self._vectors["OmVec"].append(float(val))

    def fill_kinetic_energy(self, val: float) -> None:
        self._vectors["KEVec"].append(float(val))

    def add_ntuple_row(self, which: int) -> None:
        """Close the current row of an ntuple and clear the time-series vectors."""
        ntuple = self._ntuple(which)
        row = {
            column.name: (
                list(self._vectors[column.name]) if column.vector else value
            )
            for column, value in zip(ntuple.columns, ntuple.current)
        }
        ntuple.rows.append(row)
        ntuple.reset()
        # The kinetic-energy vector is deliberately kept across rows.
        for name in ("AntennaID", "TimeVec", "VoltageVec", "OmVec"):
            self._vectors[name].clear()