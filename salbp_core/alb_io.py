from __future__ import annotations
import logging
from typing import Dict, Iterable, List, Optional

from .constants import (
    TAG_NUMBER_OF_TASKS, TAG_CYCLE_TIME, TAG_TASK_TIMES, TAG_PRECEDENCE, TAG_END,
    DEFAULT_CYCLE_TIME, STATION_LINE_RE,
)
from .models import Instance, PrecedenceEdge, ReferenceSolution, Station, Task

logger = logging.getLogger(__name__)


# -----------------------
# Line helpers
# -----------------------
def _lines(text: str) -> List[str]:
    return [line.strip() for line in (text or "").lstrip("\ufeff").splitlines()]

def _is_tag(line: str) -> bool:
    return line.startswith("<")

def _find_tag(lines: List[str], tag: str) -> Optional[int]:
    for idx, line in enumerate(lines):
        if line.lower().startswith(tag):
            return idx
    return None

def _section_body(lines: List[str], tag: str) -> List[str]:
    """
    Non-empty lines after `tag` up to the next tag line (including <end>).
    An absent section yields an empty list.
    """
    idx = _find_tag(lines, tag)
    if idx is None:
        return []
    body = []
    for line in lines[idx + 1:]:
        if _is_tag(line):
            break
        if line:
            body.append(line)
    return body

def _read_int(lines: List[str], tag: str) -> Optional[int]:
    """
    Integer following `tag`, either on the tag line itself or on the next
    non-empty line. None when the tag is missing or the value is not an integer.
    """
    idx = _find_tag(lines, tag)
    if idx is None:
        return None
    rest = lines[idx][len(tag):].strip()
    if not rest:
        rest = next((line for line in lines[idx + 1:] if line), "")
        if _is_tag(rest):
            return None
    try:
        return int(rest.split()[0])
    except (ValueError, IndexError):
        return None


# -----------------------
# Instance (.alb)
# -----------------------
def _parse_task_times(body: Iterable[str]) -> Dict[str, int]:
    times: Dict[str, int] = {}
    for line in body:
        parts = line.split()
        if len(parts) < 2:
            logger.debug("Skipping task line %r: expected '<id> <duration>'", line)
            continue
        tid = parts[0]
        try:
            dur = int(parts[1])
        except ValueError:
            logger.debug("Skipping task line %r: duration is not an integer", line)
            continue
        if dur < 0:
            logger.debug("Skipping task line %r: negative duration", line)
            continue
        if tid in times:
            logger.debug("Task %s listed twice; keeping the last duration", tid)
        times[tid] = dur
    return times

def _parse_precedence(body: Iterable[str]) -> List[PrecedenceEdge]:
    edges: List[PrecedenceEdge] = []
    seen = set()
    for line in body:
        parts = [p.strip() for p in line.split(",")]
        if len(parts) != 2 or not parts[0] or not parts[1]:
            logger.debug("Skipping precedence line %r: expected '<pred>,<succ>'", line)
            continue
        key = (parts[0], parts[1])
        if key in seen:
            continue
        seen.add(key)
        edges.append(PrecedenceEdge(predecessor=parts[0], successor=parts[1]))
    return edges

def parse_instance_text(text: str) -> Instance:
    """
    Best-effort reader for the section-tagged instance format.
    Never raises on malformed or partial input; degrades to an emptier Instance.
    """
    lines = _lines(text)

    declared = _read_int(lines, TAG_NUMBER_OF_TASKS)

    cycle_time = _read_int(lines, TAG_CYCLE_TIME)
    if cycle_time is None or cycle_time <= 0:
        logger.debug("No usable cycle time; defaulting to %d", DEFAULT_CYCLE_TIME)
        cycle_time = DEFAULT_CYCLE_TIME

    times = _parse_task_times(_section_body(lines, TAG_TASK_TIMES))
    edges = _parse_precedence(_section_body(lines, TAG_PRECEDENCE))

    instance = Instance(
        tasks=[Task(id=tid, duration=dur) for tid, dur in times.items()],
        edges=edges,
        cycle_time=cycle_time,
        declared_task_count=declared,
    )

    if declared is not None and declared != len(instance.tasks):
        logger.warning("Instance declares %d tasks but lists %d", declared, len(instance.tasks))
    for e in instance.dangling_edges():
        logger.warning("Precedence %s,%s names a task missing from <task times>",
                       e.predecessor, e.successor)
    return instance

def instance_to_text(instance: Instance) -> str:
    out = [TAG_NUMBER_OF_TASKS, str(len(instance.tasks)), "",
           TAG_CYCLE_TIME, str(instance.cycle_time), "",
           TAG_TASK_TIMES]
    out += [f"{t.id} {t.duration}" for t in instance.tasks]
    out += ["", TAG_PRECEDENCE]
    out += [f"{e.predecessor},{e.successor}" for e in instance.edges]
    out += ["", TAG_END, ""]
    return "\n".join(out)


# -----------------------
# Reference solution (.sol)
# -----------------------
def parse_solution_text(text: str) -> ReferenceSolution:
    """
    One station per `station_<n>: t1 t2 ...` line (case-insensitive prefix).
    Non-matching lines are ignored; stations keep source line order.
    """
    stations: List[Station] = []
    for line in _lines(text):
        m = STATION_LINE_RE.match(line)
        if not m:
            if line:
                logger.debug("Ignoring solution line %r", line)
            continue
        stations.append(Station(id=int(m.group(1)), tasks=m.group(2).split()))
    return ReferenceSolution(stations=stations)

def export_solution_text(stations: Iterable[Station]) -> str:
    """Player stations in the reference-solution format. Empty stations are omitted."""
    rows = [f"station_{s.id}: {' '.join(s.tasks)}" for s in stations if s.tasks]
    return "\n".join(rows) + ("\n" if rows else "")
