from __future__ import annotations

from .models import RunSummary, ScheduleResult


def compute_summary(result: ScheduleResult) -> RunSummary:
    """
    Compute averages and throughput from populated per-process metrics
    and timeline slices.

    Averages are taken over the rows present in the result, i.e. the
    completed processes. Throughput is rows divided by the last completion
    time. An empty result gets an all-zero summary.
    """
    if not result.processes:
        summary = RunSummary(average_waiting_time=0.0, average_turnaround_time=0.0, throughput=0.0)
        result.summary = summary
        return summary

    n = len(result.processes)
    makespan = max(p.completion_time for p in result.processes)
    cpu_busy_time = sum(slice_.duration for slice_ in result.timeline)

    summary = RunSummary(
        average_waiting_time=sum(p.waiting_time for p in result.processes) / n,
        average_turnaround_time=sum(p.turnaround_time for p in result.processes) / n,
        throughput=n / makespan if makespan > 0 else 0.0,
        makespan=makespan,
        cpu_busy_time=cpu_busy_time,
    )
    result.summary = summary
    return summary
