from __future__ import annotations

import csv
import json
import logging
import re
from pathlib import Path
from typing import List, Mapping, Sequence

from .errors import DegenerateInput, FileAccessError, MalformedRecord
from .models import Process

logger = logging.getLogger(__name__)

INTEGER = re.compile(r"[+-]?\d+")


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON or CSV file into a list of Process objects.

    CSV files have no header; each record is ``id,burst,arrival[,priority]``.
    Any suffix other than ``.json`` is read as CSV.
    """
    path = Path(path)

    try:
        if path.suffix.lower() == ".json":
            processes = _load_json(path)
        else:
            processes = _load_csv(path)
    except UnicodeDecodeError as exc:
        raise MalformedRecord(f"{path}: not valid UTF-8 text: {exc}") from exc
    except OSError as exc:
        raise FileAccessError(f"Cannot read workload file {path}: {exc}") from exc

    if not processes:
        raise DegenerateInput(f"Workload file {path} contains no processes")

    logger.debug("Loaded %d processes from %s", len(processes), path)
    return processes


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise MalformedRecord(f"{path}: invalid JSON: {exc}") from exc

    if not isinstance(raw, list):
        raise MalformedRecord(f"{path}: JSON workload must be a list of process objects")

    return [_process_from_mapping(entry, f"{path}[{idx}]") for idx, entry in enumerate(raw)]


def _load_csv(path: Path) -> List[Process]:
    processes: List[Process] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.reader(f)
        for row in reader:
            fields = [field.strip() for field in row]
            if not any(fields) or fields[0].startswith("#"):
                continue
            processes.append(_process_from_row(fields, f"{path}:{reader.line_num}"))
    return processes


def _process_from_row(fields: Sequence[str], where: str) -> Process:
    if len(fields) not in (3, 4):
        raise MalformedRecord(f"{where}: expected 3 or 4 fields (id,burst,arrival[,priority]), got {len(fields)}")

    values = [_parse_int(field, where) for field in fields]

    pid, burst_time, arrival_time = values[:3]
    priority = values[3] if len(values) == 4 else 0
    return _checked(Process(pid=pid, arrival_time=arrival_time, burst_time=burst_time, priority=priority), where)


def _process_from_mapping(mapping: Mapping, where: str) -> Process:
    try:
        pid = _parse_int(mapping["pid"], where)
        arrival_time = _parse_int(mapping["arrival_time"], where)
        burst_time = _parse_int(mapping["burst_time"], where)
        priority_val = mapping.get("priority")
    except (AttributeError, KeyError, TypeError) as exc:
        raise MalformedRecord(f"{where}: invalid process entry {mapping!r}") from exc

    priority = _parse_int(priority_val, where) if priority_val not in (None, "") else 0
    return _checked(Process(pid=pid, arrival_time=arrival_time, burst_time=burst_time, priority=priority), where)


def _parse_int(value: object, where: str) -> int:
    """
    Accept a JSON integer or a plain decimal string; reject floats, booleans
    and anything ``int()`` would otherwise coerce, such as ``"5_0"``.
    """
    if isinstance(value, bool):
        raise MalformedRecord(f"{where}: expected an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and INTEGER.fullmatch(value.strip()):
        return int(value)
    raise MalformedRecord(f"{where}: expected an integer, got {value!r}")


def _checked(process: Process, where: str) -> Process:
    if process.burst_time <= 0:
        raise MalformedRecord(f"{where}: burst time must be positive, got {process.burst_time}")
    if process.arrival_time < 0:
        raise MalformedRecord(f"{where}: arrival time must not be negative, got {process.arrival_time}")
    return process
