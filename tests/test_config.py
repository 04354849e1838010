from __future__ import annotations
import logging

import pytest

from salbp_core.alb_io import parse_instance_text, parse_solution_text
from salbp_core.comparator import compare_station_counts
from salbp_core.config import DEFAULT_CONFIG, SAMPLE_INSTANCES, SAMPLE_SOLUTIONS, load_config
from salbp_core.engine import can_assign, station_load
from salbp_core.errors import ConfigError
from salbp_core.logger import logger, setup_logging
from salbp_core.models import AssignmentState

def test_missing_file_gives_defaults(tmp_path):
    cfg = load_config(str(tmp_path / "nope.yaml"))
    assert cfg.model_dump() == DEFAULT_CONFIG

def test_yaml_overrides(tmp_path):
    p = tmp_path / "cfg.yaml"
    p.write_text("default_instance: i2\nlog_level: debug\nrandom_seed: 7\n", encoding="utf-8")
    cfg = load_config(str(p))
    assert cfg.default_instance == "i2"
    assert cfg.log_level == "DEBUG"
    assert cfg.random_seed == 7

def test_env_var_names_the_file(tmp_path, monkeypatch):
    p = tmp_path / "env.yaml"
    p.write_text("catalog_root: elsewhere\n", encoding="utf-8")
    monkeypatch.setenv("SALBP_CONFIG", str(p))
    assert load_config().catalog_root == "elsewhere"

@pytest.mark.parametrize(
    "content",
    [
        "catalog_kind: http\n",            # http without base_url
        "log_level: LOUD\n",
        "request_timeout: 0\n",
        "unknown_key: 1\n",
        "- just\n- a list\n",
        "key: [unclosed\n",
    ],
)
def test_invalid_config(tmp_path, content):
    p = tmp_path / "bad.yaml"
    p.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(str(p))

def test_sample_solutions_are_feasible_and_match():
    # replay every sample solution through the engine rules
    for name, text in SAMPLE_INSTANCES.items():
        inst = parse_instance_text(text)
        ref = parse_solution_text(SAMPLE_SOLUTIONS[name])
        state = AssignmentState()
        for st in ref.stations:
            state.stations.append(st.model_copy(update={"tasks": []}))
            for tid in st.tasks:
                assert can_assign(inst, state, tid, st.id), (name, tid)
                state.station(st.id).tasks.append(tid)
                state.assigned.add(tid)
            assert station_load(inst, state.station(st.id)) <= inst.cycle_time
        assert state.assigned == set(inst.task_ids())
        assert compare_station_counts(state.stations, ref).matched

def test_setup_logging_adds_handlers_once(tmp_path):
    saved = list(logger.handlers)
    logger.handlers = []
    try:
        log_file = tmp_path / "logs" / "salbp.log"
        setup_logging("debug", str(log_file))
        setup_logging("debug", str(log_file))
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 2
        logger.info("hello")
        for h in logger.handlers:
            h.flush()
        assert "hello" in log_file.read_text(encoding="utf-8")
    finally:
        for h in logger.handlers:
            h.close()
        logger.handlers = saved
