"""
Internal helpers for tests (not imported by app).
"""
from __future__ import annotations
from typing import Dict, List, Tuple

from .models import Instance, PrecedenceEdge, PuzzleSession, Task

def quick_instance(times: Dict[str, int], edges: List[Tuple[str, str]], cycle_time: int = 10) -> Instance:
    return Instance(
        tasks=[Task(id=tid, duration=d) for tid, d in times.items()],
        edges=[PrecedenceEdge(predecessor=a, successor=b) for a, b in edges],
        cycle_time=cycle_time,
        declared_task_count=len(times),
    )

def quick_session(times: Dict[str, int], edges: List[Tuple[str, str]], cycle_time: int = 10,
                  name: str = "test") -> PuzzleSession:
    return PuzzleSession(name=name, instance=quick_instance(times, edges, cycle_time))

def alb_text(times: Dict[str, int], edges: List[Tuple[str, str]], cycle_time: int = 10) -> str:
    lines = ["<number of tasks>", str(len(times)), "", "<cycle time>", str(cycle_time), "", "<task times>"]
    lines += [f"{tid} {d}" for tid, d in times.items()]
    lines += ["", "<precedence relations>"]
    lines += [f"{a},{b}" for a, b in edges]
    lines += ["", "<end>"]
    return "\n".join(lines) + "\n"
