from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Dict, List, Optional, Tuple

from .errors import DegenerateInput, InvalidArguments, InvalidProcessId
from .metrics import compute_summary
from .models import Process, ProcessMetrics, ScheduleResult, ScheduledSlice

logger = logging.getLogger(__name__)

DEFAULT_QUANTUM = 4


def _working_copy(processes: List[Process]) -> List[Process]:
    """
    Shallow copy of the workload with unique ids checked.

    Schedulers reorder this copy freely; the caller's list is never touched.
    """
    working: List[Process] = list(processes)
    seen: set[int] = set()
    for p in working:
        if p.pid in seen:
            raise InvalidProcessId(f"Duplicate process id {p.pid} in workload")
        seen.add(p.pid)
    return working


def _run_to_completion(ordered: List[Process]) -> Tuple[List[ScheduledSlice], List[ProcessMetrics]]:
    """
    Serve processes one after another in the given order, without preemption.

    The CPU idles until a process arrives if it is free earlier; otherwise
    the process waits for the CPU.
    """
    time = 0
    timeline: List[ScheduledSlice] = []
    metrics: List[ProcessMetrics] = []

    for p in ordered:
        waiting_time = max(0, time - p.arrival_time)
        start_time = p.arrival_time + waiting_time
        completion_time = start_time + p.burst_time

        timeline.append(ScheduledSlice(pid=p.pid, start_time=start_time, end_time=completion_time))
        metrics.append(
            ProcessMetrics(
                pid=p.pid,
                priority=p.priority,
                burst_time=p.burst_time,
                arrival_time=p.arrival_time,
                waiting_time=waiting_time,
                turnaround_time=completion_time - p.arrival_time,
                completion_time=completion_time,
                start_time=start_time,
            )
        )
        logger.debug("P%s runs [%d, %d) after waiting %d", p.pid, start_time, completion_time, waiting_time)

        time = completion_time

    return timeline, metrics


def schedule_fcfs(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    First-Come First-Serve (non-preemptive) scheduling.

    The workload is served in the order given; callers supply it in arrival
    order. Waiting time is recomputed for every process, including ones that
    arrive at time 0.
    """
    timeline, metrics = _run_to_completion(_working_copy(processes))

    result = ScheduleResult(algorithm=TITLES["fcfs"], quantum=None, processes=metrics, timeline=timeline)
    compute_summary(result)
    return result


def schedule_sjf(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Shortest-Job-First (non-preemptive) scheduling.

    Every job is assumed known up front, so the run order is simply ascending
    burst time (stable, ties keep input order); arrival time only delays a
    job's start. Rows come back ordered by process id.

    Waiting time is start minus arrival, so it counts only time spent behind
    jobs that ran first; the CPU idle gap before a late arrival is not
    reported as waiting.
    """
    ordered = sorted(_working_copy(processes), key=lambda p: p.burst_time)
    timeline, metrics = _run_to_completion(ordered)

    rows: Dict[int, ProcessMetrics] = {m.pid: m for m in metrics}

    result = ScheduleResult(
        algorithm=TITLES["sjf"],
        quantum=None,
        processes=[rows[pid] for pid in sorted(rows)],
        timeline=timeline,
    )
    compute_summary(result)
    return result


def schedule_priority(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Priority scheduling (non-preemptive), burst first.

    Despite the name the primary key is burst time; priority only breaks
    ties, lower values first. Rows come back in execution order.
    """
    ordered = sorted(_working_copy(processes), key=lambda p: (p.burst_time, p.priority))
    timeline, metrics = _run_to_completion(ordered)

    result = ScheduleResult(algorithm=TITLES["priority"], quantum=None, processes=metrics, timeline=timeline)
    compute_summary(result)
    return result


def schedule_rr(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Round Robin scheduling with a fixed time quantum.

    A preempted process goes straight back to the tail of the ready queue,
    ahead of anything admitted on the next pass. Waiting time is accumulated
    per dispatch as the time since the process last became eligible.
    Rows come back in completion order.
    """
    if quantum is None:
        quantum = DEFAULT_QUANTUM
    if quantum <= 0:
        raise DegenerateInput(f"Round Robin requires a positive quantum, got {quantum}")

    pending: Deque[Process] = deque(sorted(_working_copy(processes), key=lambda p: p.arrival_time))
    ready: Deque[Process] = deque()

    remaining = {p.pid: p.burst_time for p in pending}
    eligible_at = {p.pid: p.arrival_time for p in pending}
    waiting = {p.pid: 0 for p in pending}
    first_start: Dict[int, int] = {}

    time = 0
    timeline: List[ScheduledSlice] = []
    metrics: List[ProcessMetrics] = []

    while pending or ready:
        while pending and pending[0].arrival_time <= time:
            ready.append(pending.popleft())

        if not ready:
            # CPU idle: jump to the next arrival.
            time = pending[0].arrival_time
            continue

        p = ready.popleft()
        run_time = min(quantum, remaining[p.pid])

        waiting[p.pid] += time - eligible_at[p.pid]
        first_start.setdefault(p.pid, time)

        timeline.append(ScheduledSlice(pid=p.pid, start_time=time, end_time=time + run_time))
        logger.debug("P%s dispatched at %d for %d", p.pid, time, run_time)

        time += run_time
        remaining[p.pid] -= run_time

        if remaining[p.pid] > 0:
            eligible_at[p.pid] = time
            ready.append(p)
            continue

        metrics.append(
            ProcessMetrics(
                pid=p.pid,
                priority=p.priority,
                burst_time=p.burst_time,
                arrival_time=p.arrival_time,
                waiting_time=waiting[p.pid],
                turnaround_time=time - p.arrival_time,
                completion_time=time,
                start_time=first_start[p.pid],
            )
        )
        logger.debug("P%s completes at %d", p.pid, time)

    result = ScheduleResult(algorithm=TITLES["rr"], quantum=quantum, processes=metrics, timeline=timeline)
    compute_summary(result)
    return result


ALGORITHMS = {
    "fcfs": schedule_fcfs,
    "sjf": schedule_sjf,
    "priority": schedule_priority,
    "rr": schedule_rr,
}

TITLES = {
    "fcfs": "First-come, first-serve",
    "sjf": "Shortest-job-first",
    "priority": "Priority",
    "rr": "Round-robin",
}


def run_algorithm(name: str, processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Dispatch to the requested algorithm. Quantum is only used by round-robin.
    """
    name = name.lower()
    if name not in ALGORITHMS:
        raise InvalidArguments(f"Unknown algorithm '{name}' (choose from {', '.join(ALGORITHMS)})")

    func = ALGORITHMS[name]
    return func(list(processes), quantum=quantum)


def run_all(processes: List[Process], quantum: Optional[int] = None) -> List[ScheduleResult]:
    return [run_algorithm(name, processes, quantum=quantum) for name in ALGORITHMS]
