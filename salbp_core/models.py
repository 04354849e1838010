from __future__ import annotations
import threading
from typing import Any, Dict, List, Literal, Optional, Set, Tuple

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator, model_validator

from .constants import DEFAULT_CYCLE_TIME, VERDICT_MATCH

ViolationKind = Literal[
    "unknown_task", "unknown_station", "already_assigned",
    "precedence", "capacity", "station_not_empty", "not_in_station",
]
VerdictKind = Literal["station-count-match", "station-count-mismatch"]

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


# -----------------------
# Instance (immutable per puzzle)
# -----------------------
class Task(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    duration: int = Field(ge=0)


class PrecedenceEdge(BaseModel):
    model_config = ConfigDict(frozen=True)

    predecessor: str
    successor: str


class Instance(BaseModel):
    """
    One SALBP-1 puzzle: tasks in file order, precedence edges and cycle time.
    Lookups are indexed once after construction.
    """
    model_config = ConfigDict(frozen=True)

    tasks: Tuple[Task, ...] = ()
    edges: Tuple[PrecedenceEdge, ...] = ()
    cycle_time: int = Field(default=DEFAULT_CYCLE_TIME, gt=0)
    declared_task_count: Optional[int] = None

    _durations: Dict[str, int] = PrivateAttr(default_factory=dict)
    _preds: Dict[str, List[str]] = PrivateAttr(default_factory=dict)
    _succs: Dict[str, List[str]] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: Any) -> None:
        self._durations = {t.id: t.duration for t in self.tasks}
        for e in self.edges:
            preds = self._preds.setdefault(e.successor, [])
            if e.predecessor not in preds:
                preds.append(e.predecessor)
            succs = self._succs.setdefault(e.predecessor, [])
            if e.successor not in succs:
                succs.append(e.successor)

    def task_ids(self) -> List[str]:
        return [t.id for t in self.tasks]

    def durations(self) -> Dict[str, int]:
        return dict(self._durations)

    def has_task(self, task_id: str) -> bool:
        return task_id in self._durations

    def duration_of(self, task_id: str) -> Optional[int]:
        return self._durations.get(task_id)

    def predecessors(self, task_id: str) -> List[str]:
        return list(self._preds.get(task_id, []))

    def successors(self, task_id: str) -> List[str]:
        return list(self._succs.get(task_id, []))

    def dangling_edges(self) -> List[PrecedenceEdge]:
        return [e for e in self.edges
                if e.predecessor not in self._durations or e.successor not in self._durations]

    def total_work(self) -> int:
        return sum(self._durations.values())


# -----------------------
# Player assignment
# -----------------------
class Station(BaseModel):
    id: int
    tasks: List[str] = Field(default_factory=list)  # insertion order


class AssignmentState(BaseModel):
    stations: List[Station] = Field(default_factory=list)  # creation order
    assigned: Set[str] = Field(default_factory=set)       # union of station tasks

    def station(self, station_id: int) -> Optional[Station]:
        for s in self.stations:
            if s.id == station_id:
                return s
        return None

    def station_of(self, task_id: str) -> Optional[int]:
        for s in self.stations:
            if task_id in s.tasks:
                return s.id
        return None


class ReferenceSolution(BaseModel):
    stations: List[Station] = Field(default_factory=list)  # line order of the source

    @property
    def station_count(self) -> int:
        return len(self.stations)


# -----------------------
# Results
# -----------------------
class Violation(BaseModel):
    kind: ViolationKind
    task_id: Optional[str] = None
    station_id: Optional[int] = None
    missing_predecessors: List[str] = Field(default_factory=list)
    load: Optional[int] = None  # station load the rejected action would have produced
    duration: Optional[int] = None
    cycle_time: Optional[int] = None

    def message(self) -> str:
        if self.kind == "precedence":
            missing = ", ".join(self.missing_predecessors)
            return (f"Cannot assign task {self.task_id}: precedence not respected "
                    f"(assign {missing} first).")
        if self.kind == "capacity":
            return (f"Cannot add task {self.task_id}: total ({self.load}) "
                    f"exceeds cycle time ({self.cycle_time}).")
        if self.kind == "station_not_empty":
            return f"You cannot delete station {self.station_id}: it still contains tasks."
        if self.kind == "already_assigned":
            return f"Task {self.task_id} is already assigned to a station."
        if self.kind == "unknown_station":
            return f"Station {self.station_id} does not exist."
        if self.kind == "not_in_station":
            return f"Task {self.task_id} is not in station {self.station_id}."
        return f"Task {self.task_id} is not part of this instance."


class Verdict(BaseModel):
    kind: VerdictKind
    player_count: int
    reference_count: int

    @property
    def matched(self) -> bool:
        return self.kind == VERDICT_MATCH


class LineMetrics(BaseModel):
    total_work: int
    cycle_time: int
    min_stations: int
    actual_stations: int
    idle_time: int
    efficiency: float  # percent
    balance_delay: float  # percent
    station_loads: Dict[int, int] = Field(default_factory=dict)


# -----------------------
# Session (one per loaded puzzle)
# -----------------------
class PuzzleSession(BaseModel):
    name: str
    instance: Instance
    state: AssignmentState = Field(default_factory=AssignmentState)
    selected_task: Optional[str] = None
    reference: Optional[ReferenceSolution] = None

    _lock: Any = PrivateAttr(default_factory=threading.RLock)

    @property
    def lock(self):
        return self._lock


# -----------------------
# App configuration
# -----------------------
class AppConfig(BaseModel):
    catalog_kind: Literal["directory", "http"] = "directory"
    catalog_root: str = "assets"
    base_url: str = ""
    request_timeout: float = 10.0
    default_instance: str = "i1"
    random_seed: Optional[int] = None
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @field_validator("log_level")
    def _known_level(cls, v):
        v = str(v).upper()
        if v not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(LOG_LEVELS)}")
        return v

    @field_validator("request_timeout")
    def _positive_timeout(cls, v):
        if v <= 0:
            raise ValueError("request_timeout must be positive")
        return v

    @model_validator(mode="after")
    def _http_needs_url(self):
        if self.catalog_kind == "http" and not self.base_url:
            raise ValueError("base_url is required when catalog_kind is 'http'")
        return self
