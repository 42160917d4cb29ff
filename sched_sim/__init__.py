"""
CPU scheduling simulator package.

Computes FCFS, SJF, Priority and Round-Robin schedules over a static
workload and renders Gantt charts and timing tables for each of them.
"""

__all__ = ["cli"]
