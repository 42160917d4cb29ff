import pytest

from sched_sim.algorithms import (
    ALGORITHMS,
    DEFAULT_QUANTUM,
    run_algorithm,
    run_all,
    schedule_fcfs,
    schedule_priority,
    schedule_rr,
    schedule_sjf,
)
from sched_sim.errors import DegenerateInput, InvalidArguments, InvalidProcessId
from sched_sim.models import Process


def _mixed():
    # Arrival order, with an idle gap before P5.
    return [
        Process(1, arrival_time=0, burst_time=7, priority=2),
        Process(2, arrival_time=2, burst_time=4, priority=1),
        Process(3, arrival_time=4, burst_time=1, priority=3),
        Process(4, arrival_time=5, burst_time=4, priority=0),
        Process(5, arrival_time=20, burst_time=3, priority=1),
    ]


def _by_pid(result):
    return {m.pid: m for m in result.processes}


def test_fcfs_example():
    res = schedule_fcfs([Process(1, arrival_time=0, burst_time=5), Process(2, arrival_time=1, burst_time=3)])
    p1, p2 = res.processes
    assert (p1.waiting_time, p1.turnaround_time, p1.completion_time) == (0, 5, 5)
    assert (p2.waiting_time, p2.turnaround_time, p2.completion_time) == (4, 7, 8)
    assert res.summary.average_waiting_time == 2.0
    assert res.summary.average_turnaround_time == 6.0
    assert res.summary.throughput == 0.25


def test_fcfs_recomputes_wait_for_zero_arrival():
    # A process arriving at 0 behind others must wait for the whole backlog,
    # not inherit the previous process's waiting time (which would be 3).
    res = schedule_fcfs(
        [
            Process(1, arrival_time=0, burst_time=5),
            Process(2, arrival_time=2, burst_time=3),
            Process(3, arrival_time=0, burst_time=2),
        ]
    )
    assert [m.waiting_time for m in res.processes] == [0, 3, 8]
    assert res.processes[2].completion_time == 10


def test_fcfs_keeps_input_order_and_idles():
    res = schedule_fcfs([Process(2, arrival_time=0, burst_time=2), Process(1, arrival_time=5, burst_time=3)])
    assert [s.pid for s in res.timeline] == [2, 1]
    assert (res.timeline[1].start_time, res.timeline[1].end_time) == (5, 8)
    assert res.processes[1].waiting_time == 0


def test_sjf_example():
    res = schedule_sjf([Process(1, arrival_time=0, burst_time=8), Process(2, arrival_time=1, burst_time=4)])
    assert [s.pid for s in res.timeline] == [2, 1]
    assert (res.timeline[0].start_time, res.timeline[0].end_time) == (1, 5)
    assert (res.timeline[1].start_time, res.timeline[1].end_time) == (5, 13)
    # Rows are reported by id, not by execution order.
    assert [m.pid for m in res.processes] == [1, 2]
    rows = _by_pid(res)
    assert rows[2].waiting_time == 0
    assert rows[1].waiting_time == 5
    assert rows[1].completion_time == 13


def test_sjf_stable_on_equal_bursts():
    res = schedule_sjf(
        [
            Process(1, arrival_time=0, burst_time=3),
            Process(2, arrival_time=0, burst_time=1),
            Process(3, arrival_time=0, burst_time=3),
        ]
    )
    assert [s.pid for s in res.timeline] == [2, 1, 3]


def test_sjf_sparse_ids():
    res = schedule_sjf(
        [
            Process(10, arrival_time=0, burst_time=2),
            Process(3, arrival_time=0, burst_time=5),
            Process(7, arrival_time=0, burst_time=1),
        ]
    )
    assert [m.pid for m in res.processes] == [3, 7, 10]
    assert [s.pid for s in res.timeline] == [7, 10, 3]


def test_duplicate_ids_rejected():
    procs = [Process(1, arrival_time=0, burst_time=2), Process(1, arrival_time=1, burst_time=3)]
    for func in ALGORITHMS.values():
        with pytest.raises(InvalidProcessId):
            func(procs)


def test_priority_burst_first_then_priority():
    procs = [
        Process(1, arrival_time=0, burst_time=4, priority=3),
        Process(2, arrival_time=0, burst_time=4, priority=1),
        Process(3, arrival_time=0, burst_time=2, priority=5),
    ]
    snapshot = list(procs)
    res = schedule_priority(procs)
    assert [s.pid for s in res.timeline] == [3, 2, 1]
    assert [m.pid for m in res.processes] == [3, 2, 1]
    assert [m.waiting_time for m in res.processes] == [0, 2, 6]
    assert procs == snapshot


def test_priority_idle_until_arrival():
    res = schedule_priority([Process(1, arrival_time=10, burst_time=3)])
    m = res.processes[0]
    assert (m.waiting_time, m.start_time, m.completion_time) == (0, 10, 13)


def test_rr_example():
    res = schedule_rr([Process(1, arrival_time=0, burst_time=5), Process(2, arrival_time=0, burst_time=3)], quantum=4)
    assert [(s.pid, s.start_time, s.end_time) for s in res.timeline] == [(1, 0, 4), (2, 4, 7), (1, 7, 8)]
    assert [m.pid for m in res.processes] == [2, 1]
    rows = _by_pid(res)
    assert rows[2].turnaround_time == 7
    assert rows[1].turnaround_time == 8
    assert rows[1].waiting_time == 3
    assert rows[1].start_time == 0


def test_rr_default_quantum():
    res = schedule_rr([Process(1, arrival_time=0, burst_time=9)])
    assert res.quantum == DEFAULT_QUANTUM == 4
    assert [s.duration for s in res.timeline] == [4, 4, 1]


def test_rr_preempted_process_goes_ahead_of_new_arrival():
    res = schedule_rr([Process(1, arrival_time=0, burst_time=6), Process(2, arrival_time=2, burst_time=2)], quantum=4)
    assert [(s.pid, s.start_time, s.end_time) for s in res.timeline] == [(1, 0, 4), (1, 4, 6), (2, 6, 8)]
    assert _by_pid(res)[2].waiting_time == 4


def test_rr_idle_jumps_to_next_arrival():
    res = schedule_rr([Process(1, arrival_time=0, burst_time=2), Process(2, arrival_time=6, burst_time=1)], quantum=4)
    assert [(s.pid, s.start_time, s.end_time) for s in res.timeline] == [(1, 0, 2), (2, 6, 7)]
    assert res.summary.throughput == pytest.approx(2 / 7)


@pytest.mark.parametrize("quantum", [0, -3])
def test_rr_rejects_non_positive_quantum(quantum):
    with pytest.raises(DegenerateInput):
        schedule_rr(_mixed(), quantum=quantum)


@pytest.mark.parametrize("name", list(ALGORITHMS))
def test_timing_invariants(name):
    procs = _mixed()
    res = run_algorithm(name, procs, quantum=3)
    assert len(res.processes) == len(procs)
    for m in res.processes:
        assert m.turnaround_time == m.completion_time - m.arrival_time
        assert m.turnaround_time == m.burst_time + m.waiting_time
        assert m.completion_time >= m.arrival_time + m.burst_time

    for p in procs:
        assert sum(s.duration for s in res.timeline if s.pid == p.pid) == p.burst_time

    last_completion = max(m.completion_time for m in res.processes)
    assert res.summary.makespan == last_completion
    assert res.summary.throughput == pytest.approx(len(procs) / last_completion)
    assert res.summary.cpu_busy_time == sum(p.burst_time for p in procs)


def test_rr_timeline_shape():
    procs = _mixed()
    res = schedule_rr(procs, quantum=3)
    completion = {m.pid: m.completion_time for m in res.processes}

    assert all(0 < s.duration <= 3 for s in res.timeline)
    for prev, nxt in zip(res.timeline, res.timeline[1:]):
        assert prev.end_time <= nxt.start_time
        if nxt.start_time > prev.end_time:
            # A gap is only allowed while nothing unfinished has arrived.
            unfinished = [p for p in procs if completion[p.pid] > prev.end_time]
            assert all(p.arrival_time >= nxt.start_time for p in unfinished)


@pytest.mark.parametrize("name", list(ALGORITHMS))
def test_idempotent_and_input_untouched(name):
    procs = list(reversed(_mixed()))
    snapshot = list(procs)
    first = run_algorithm(name, procs)
    second = run_algorithm(name, procs)
    assert first == second
    assert procs == snapshot


@pytest.mark.parametrize("name", list(ALGORITHMS))
def test_single_process(name):
    res = run_algorithm(name, [Process(1, arrival_time=0, burst_time=6)])
    m = res.processes[0]
    assert m.waiting_time == 0
    assert m.turnaround_time == 6
    assert res.summary.throughput == pytest.approx(1 / 6)


@pytest.mark.parametrize("name", list(ALGORITHMS))
def test_empty_workload(name):
    res = run_algorithm(name, [])
    assert res.processes == []
    assert res.timeline == []
    assert res.summary.average_waiting_time == 0.0
    assert res.summary.average_turnaround_time == 0.0
    assert res.summary.throughput == 0.0


def test_run_algorithm_unknown():
    with pytest.raises(InvalidArguments):
        run_algorithm("srtf", _mixed())
    with pytest.raises(ValueError):
        run_algorithm("mlfq", _mixed())


def test_run_all_order_and_titles():
    results = run_all(_mixed(), quantum=2)
    assert [r.algorithm for r in results] == [
        "First-come, first-serve",
        "Shortest-job-first",
        "Priority",
        "Round-robin",
    ]
    assert [r.quantum for r in results] == [None, None, None, 2]
