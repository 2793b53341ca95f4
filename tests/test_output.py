import json

import pytest

from qtnmsim.output import SCORE_NTUPLE, SIGNAL_NTUPLE, GasHit, OutputManager


def _load(manager):
    return json.loads(manager.path.read_text(encoding="utf-8"))["ntuple"]


def test_gas_hit_equality_and_defaults():
    hit = GasHit(track_id=3, edep=1.5)
    assert hit == GasHit(track_id=3, edep=1.5)
    assert hit != GasHit(track_id=4, edep=1.5)
    assert hit.posz == 0.0


def test_path_gets_suffix_when_missing(tmp_path):
    manager = OutputManager(str(tmp_path / "run"))
    assert manager.path.name == "run.json"
    kept = OutputManager(str(tmp_path / "run.out"))
    assert kept.path.name == "run.out"


def test_book_creates_ntuple_columns(tmp_path):
    manager = OutputManager(str(tmp_path / "out.json"))
    manager.book()
    manager.save()
    ntuples = _load(manager)
    assert ntuples["Score"]["title"] == "Hits"
    assert ntuples["Signal"]["title"] == "Time-series"
    score_names = [c["name"] for c in ntuples["Score"]["columns"]]
    assert score_names[:4] == ["EventID", "TrackID", "Edep", "TimeStamp"]
    signal_names = [c["name"] for c in ntuples["Signal"]["columns"]]
    assert signal_names[-5:] == ["AntennaID", "TimeVec", "VoltageVec", "OmVec", "KEVec"]


def test_score_row_round_trip(tmp_path):
    manager = OutputManager(str(tmp_path / "out.json"))
    manager.book()
    manager.fill_ntuple_int(SCORE_NTUPLE, 0, 7)
    manager.fill_ntuple_int(SCORE_NTUPLE, 1, 2)
    manager.fill_ntuple_double(SCORE_NTUPLE, 2, 0.25)
    manager.add_ntuple_row(SCORE_NTUPLE)
    manager.add_ntuple_row(SCORE_NTUPLE)
    manager.save()
    rows = _load(manager)["Score"]["rows"]
    assert len(rows) == 2
    assert rows[0]["EventID"] == 7
    assert rows[0]["TrackID"] == 2
    assert rows[0]["Edep"] == 0.25
    assert rows[1]["EventID"] == 0
    assert rows[1]["Edep"] == 0.0


def test_signal_row_captures_vectors_and_clears_them(tmp_path):
    manager = OutputManager(str(tmp_path / "out.json"))
    manager.book()
    manager.fill_antenna(0)
    manager.fill_antenna(1)
    manager.fill_time(1.0)
    manager.fill_voltage(2.0)
    manager.fill_omega(3.0)
    manager.fill_kinetic_energy(18.5)
    manager.add_ntuple_row(SIGNAL_NTUPLE)
    vectors = manager.vectors
    assert vectors["AntennaID"] == []
    assert vectors["TimeVec"] == []
    assert vectors["KEVec"] == [18.5]
    manager.save()
    row = _load(manager)["Signal"]["rows"][0]
    assert row["AntennaID"] == [0, 1]
    assert row["TimeVec"] == [1.0]
    assert row["VoltageVec"] == [2.0]
    assert row["OmVec"] == [3.0]
    assert row["KEVec"] == [18.5]


def test_save_clears_rows_and_rebook_writes_fresh_file(tmp_path):
    manager = OutputManager(str(tmp_path / "out.json"))
    manager.book()
    manager.add_ntuple_row(SCORE_NTUPLE)
    manager.save()
    manager.book()
    manager.save()
    assert _load(manager)["Score"]["rows"] == []


def test_save_without_book_writes_nothing(tmp_path):
    manager = OutputManager(str(tmp_path / "out.json"))
    manager.save()
    assert not manager.path.exists()


def test_fill_before_book_raises(tmp_path):
    manager = OutputManager(str(tmp_path / "out.json"))
    with pytest.raises(RuntimeError):
        manager.fill_ntuple_int(SCORE_NTUPLE, 0, 1)


def test_wrong_column_type_raises(tmp_path):
    manager = OutputManager(str(tmp_path / "out.json"))
    manager.book()
    with pytest.raises(TypeError):
        manager.fill_ntuple_double(SCORE_NTUPLE, 0, 1.0)
    with pytest.raises(TypeError):
        manager.fill_ntuple_int(SCORE_NTUPLE, 2, 1)
    with pytest.raises(TypeError):
        manager.fill_ntuple_int(SIGNAL_NTUPLE, 7, 1)


def test_bad_ntuple_or_column_raises(tmp_path):
    manager = OutputManager(str(tmp_path / "out.json"))
    manager.book()
    with pytest.raises(IndexError):
        manager.add_ntuple_row(5)
    with pytest.raises(IndexError):
        manager.fill_ntuple_double(SCORE_NTUPLE, 42, 1.0)


def test_book_into_missing_directory_raises(tmp_path):
    manager = OutputManager(str(tmp_path / "missing" / "out.json"))
    with pytest.raises(OSError):
        manager.book()