import pytest

from scheduling_sim.algorithms import simulate
from scheduling_sim.errors import InvalidInputError
from scheduling_sim.models import Policy, Process
from scheduling_sim.registry import ProcessRegistry, validate_processes


def test_add_delete_clear():
    reg = ProcessRegistry()
    reg.add(Process("A", arrival_time=0, burst_time=2))
    reg.add(Process("B", arrival_time=1, burst_time=3))
    assert len(reg) == 2
    assert "A" in reg

    removed = reg.delete("A")
    assert removed.pid == "A"
    assert [p.pid for p in reg] == ["B"]

    reg.clear()
    assert len(reg) == 0


def test_delete_unknown_pid():
    reg = ProcessRegistry()
    with pytest.raises(KeyError):
        reg.delete("nope")


def test_snapshot_is_isolated_from_later_changes():
    reg = ProcessRegistry.from_processes([Process("A", arrival_time=0, burst_time=2)])
    snap = reg.snapshot()
    reg.add(Process("B", arrival_time=0, burst_time=1))
    assert [p.pid for p in snap] == ["A"]


def test_registry_feeds_simulation():
    reg = ProcessRegistry.from_processes(
        [
            Process("A", arrival_time=0, burst_time=2),
            Process("B", arrival_time=0, burst_time=1),
        ]
    )
    report = simulate(reg.snapshot(), Policy.SJF)
    assert [s.pid for s in report.segments] == ["B", "A"]


@pytest.mark.parametrize(
    "process, message",
    [
        (Process("", arrival_time=0, burst_time=1), "required"),
        (Process("A", arrival_time=-1, burst_time=1), "arrival"),
        (Process("A", arrival_time=0, burst_time=0), "burst"),
        (Process("A", arrival_time=0, burst_time=-2), "burst"),
        (Process("A", arrival_time="0", burst_time=1), "arrival"),
        (Process("A", arrival_time=0, burst_time=float("nan")), "burst"),
        (Process("A", arrival_time=0, burst_time=1, priority="high"), "priority"),
    ],
)
def test_add_rejects_bad_records(process, message):
    reg = ProcessRegistry()
    with pytest.raises(InvalidInputError, match=message):
        reg.add(process)
    assert len(reg) == 0


def test_add_rejects_duplicate_id():
    reg = ProcessRegistry()
    reg.add(Process("A", arrival_time=0, burst_time=1))
    with pytest.raises(InvalidInputError, match="already exists"):
        reg.add(Process("A", arrival_time=3, burst_time=1))


def test_validate_empty_set():
    with pytest.raises(InvalidInputError, match="at least one"):
        validate_processes([], Policy.FCFS)


def test_validate_duplicate_in_raw_list():
    procs = [Process("A", arrival_time=0, burst_time=1), Process("A", arrival_time=1, burst_time=1)]
    with pytest.raises(InvalidInputError):
        simulate(procs, Policy.FCFS)


def test_validate_round_robin_needs_quantum():
    procs = [Process("A", arrival_time=0, burst_time=1)]
    with pytest.raises(InvalidInputError, match="quantum"):
        validate_processes(procs, Policy.RR)
    with pytest.raises(InvalidInputError, match="quantum"):
        validate_processes(procs, Policy.RR, quantum=-1)
    validate_processes(procs, Policy.RR, quantum=1)


def test_validate_priority_needs_some_priority():
    procs = [Process("A", arrival_time=0, burst_time=1), Process("B", arrival_time=0, burst_time=1)]
    with pytest.raises(InvalidInputError, match="Priority"):
        validate_processes(procs, Policy.PRIORITY)
    validate_processes(procs + [Process("C", arrival_time=0, burst_time=1, priority=1)], Policy.PRIORITY)


def test_validate_whole_number_floats_allowed_for_srtf():
    validate_processes([Process("A", arrival_time=0.5, burst_time=3.0)], Policy.SRTF)
