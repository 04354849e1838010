from __future__ import annotations
from salbp_core.engine import (
    can_assign, can_remove_station, check_assign, check_remove_station,
    is_fully_assigned, line_metrics, ready_tasks, station_load, unassigned_tasks,
)
from salbp_core.engine_test_helpers import quick_instance
from salbp_core.models import AssignmentState, Station

def _state(*stations):
    st = AssignmentState(stations=[Station(id=i, tasks=list(ts)) for i, ts in stations])
    st.assigned = {t for s in st.stations for t in s.tasks}
    return st

def test_precedence_checked_before_capacity():
    inst = quick_instance({"1": 4, "2": 20}, [("1", "2")], cycle_time=10)
    v = check_assign(inst, _state((1, [])), "2", 1)
    # "2" also breaks capacity, but the missing predecessor is reported
    assert v.kind == "precedence"
    assert v.missing_predecessors == ["1"]

def test_capacity_boundary():
    inst = quick_instance({"1": 4, "2": 6, "3": 7}, [], cycle_time=10)
    state = _state((1, ["1"]))
    assert can_assign(inst, state, "2", 1)  # 4 + 6 == 10 is allowed
    v = check_assign(inst, state, "3", 1)
    assert v.kind == "capacity"
    assert v.load == 11 and v.cycle_time == 10
    assert v.duration == 7
    assert "11" in v.message() and "10" in v.message()

def test_already_assigned_and_unknowns():
    inst = quick_instance({"1": 1}, [])
    state = _state((1, ["1"]), (2, []))
    assert check_assign(inst, state, "1", 2).kind == "already_assigned"
    assert check_assign(inst, state, "zz", 2).kind == "unknown_task"
    assert check_assign(inst, state, "1", 99).kind == "unknown_station"

def test_dangling_predecessor_is_never_satisfied():
    inst = quick_instance({"1": 1}, [("ghost", "1")])
    v = check_assign(inst, _state((1, [])), "1", 1)
    assert v.kind == "precedence"
    assert v.missing_predecessors == ["ghost"]

def test_remove_station_rule():
    state = _state((1, ["a"]), (2, []))
    assert check_remove_station(state, 1).kind == "station_not_empty"
    assert can_remove_station(state, 2)
    assert check_remove_station(state, 3).kind == "unknown_station"

def test_is_fully_assigned():
    inst = quick_instance({"1": 1, "2": 1}, [])
    assert not is_fully_assigned(inst, _state((1, ["1"])))
    assert is_fully_assigned(inst, _state((1, ["1"]), (2, ["2"])))
    assert is_fully_assigned(quick_instance({}, []), _state())

def test_ready_and_unassigned_tasks():
    inst = quick_instance({"1": 1, "2": 1, "3": 1}, [("1", "3"), ("2", "3")])
    state = _state((1, ["1"]))
    assert unassigned_tasks(inst, state) == ["2", "3"]
    assert ready_tasks(inst, state) == ["2"]

def test_station_load_ignores_unknown_ids():
    inst = quick_instance({"1": 4}, [])
    assert station_load(inst, Station(id=1, tasks=["1", "nope"])) == 4

def test_line_metrics():
    inst = quick_instance({"1": 4, "2": 5, "3": 3}, [], cycle_time=10)
    m = line_metrics(inst, [Station(id=1, tasks=["1", "3"]), Station(id=2, tasks=["2"])])
    assert m.total_work == 12
    assert m.min_stations == 2
    assert m.actual_stations == 2
    assert m.idle_time == 8
    assert m.station_loads == {1: 7, 2: 5}
    assert round(m.efficiency, 2) == 60.0
    assert round(m.balance_delay, 2) == 40.0

def test_line_metrics_without_stations():
    m = line_metrics(quick_instance({}, []), [])
    assert m.min_stations == 1
    assert m.efficiency == 0.0
