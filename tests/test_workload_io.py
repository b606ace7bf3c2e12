from pathlib import Path

import pytest

from scheduling_sim.errors import InvalidInputError
from scheduling_sim.workload_io import load_workload
from scheduling_sim.models import Process


def test_load_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":"A","arrival_time":0,"burst_time":3,"priority":1},'
                 '{"pid":"B","arrival_time":1.5,"burst_time":2}]')
    procs = load_workload(p)
    assert isinstance(procs[0], Process)
    assert procs[0].priority == 1
    assert procs[1].priority is None
    assert procs[1].arrival_time == 1.5


def test_load_csv(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival_time,burst_time,priority\nA,0,3,1\nB,1,2.5,\n")
    procs = load_workload(p)
    assert procs[0].pid == "A"
    assert isinstance(procs[0].burst_time, int)
    assert procs[1].burst_time == 2.5
    assert procs[1].priority is None


def test_load_csv_without_priority_column(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival_time,burst_time\nA,0,3\n")
    assert load_workload(p) == [Process("A", arrival_time=0, burst_time=3)]


def test_unsupported_suffix(tmp_path: Path):
    p = tmp_path / "w.txt"
    p.write_text("")
    with pytest.raises(InvalidInputError, match="Unsupported"):
        load_workload(p)


def test_bad_entry(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival_time,burst_time\nA,zero,3\n")
    with pytest.raises(InvalidInputError, match="Invalid process entry"):
        load_workload(p)


def test_json_must_be_list(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('{"pid": "A"}')
    with pytest.raises(InvalidInputError, match="list"):
        load_workload(p)


def test_invalid_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text("[{")
    with pytest.raises(InvalidInputError, match="invalid JSON"):
        load_workload(p)
