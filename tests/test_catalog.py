from __future__ import annotations
import json
import random

import pytest
import requests

from salbp_core.catalog import (
    DirectoryCatalog, HttpCatalog, catalog_from_config, fetch_first_available, pick_other_instance,
)
from salbp_core.config import ensure_assets_exist
from salbp_core.errors import CatalogEmptyError, ResourceUnavailableError
from salbp_core.models import AppConfig

def test_directory_catalog_reads_sample_assets(tmp_path):
    ensure_assets_exist(str(tmp_path))
    cat = DirectoryCatalog(tmp_path)
    assert cat.list_instances() == ["i1", "i2"]
    assert "<task times>" in cat.instance_text("i1")
    assert "<task times>" in cat.instance_text("i1.alb")
    assert cat.solution_text("i2").startswith("station_1:")

def test_directory_catalog_missing_files(tmp_path):
    cat = DirectoryCatalog(tmp_path)
    with pytest.raises(ResourceUnavailableError):
        cat.list_instances()
    with pytest.raises(ResourceUnavailableError):
        cat.instance_text("i1")
    with pytest.raises(ResourceUnavailableError):
        cat.solution_text("i1")

def test_directory_catalog_rejects_non_list_json(tmp_path):
    (tmp_path / "instance").mkdir()
    (tmp_path / "instance" / "list.json").write_text(json.dumps({"a": 1}), encoding="utf-8")
    with pytest.raises(ResourceUnavailableError):
        DirectoryCatalog(tmp_path).list_instances()

class _Resp:
    def __init__(self, text, status=200):
        self.text = text
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

def test_http_catalog(monkeypatch):
    pages = {
        "http://host/app/instance/list.json": _Resp('["a.alb", "b"]'),
        "http://host/app/instance/a.alb": _Resp("<cycle time>\n5\n"),
        "http://host/app/soluce/a.sol": _Resp("missing", status=404),
    }
    seen = []

    def fake_get(url, timeout=None):
        seen.append((url, timeout))
        if url not in pages:
            raise requests.ConnectionError("no route")
        return pages[url]

    monkeypatch.setattr(requests, "get", fake_get)
    cat = HttpCatalog("http://host/app/", timeout=3)
    assert cat.list_instances() == ["a", "b"]
    assert cat.instance_text("a") == "<cycle time>\n5\n"
    with pytest.raises(ResourceUnavailableError):
        cat.solution_text("a")
    with pytest.raises(ResourceUnavailableError):
        cat.instance_text("b")
    assert all(t == 3 for _, t in seen)

def test_catalog_from_config(tmp_path):
    assert isinstance(catalog_from_config(AppConfig(catalog_root=str(tmp_path))), DirectoryCatalog)
    http = catalog_from_config(AppConfig(catalog_kind="http", base_url="http://x"))
    assert isinstance(http, HttpCatalog)

def test_pick_other_instance():
    rng = random.Random(0)
    for _ in range(20):
        assert pick_other_instance(["i1", "i2", "i3"], "i1", rng) in {"i2", "i3"}
    assert pick_other_instance(["i1"], "i1", rng) == "i1"
    with pytest.raises(CatalogEmptyError):
        pick_other_instance([], "i1", rng)

def test_directory_catalog_reports_undecodable_file(tmp_path):
    (tmp_path / "instance").mkdir()
    (tmp_path / "instance" / "x.alb").write_bytes(b"<task times>\n1 4\xff\n")
    with pytest.raises(ResourceUnavailableError):
        DirectoryCatalog(tmp_path).instance_text("x")

def test_directory_catalog_drops_byte_order_mark(tmp_path):
    (tmp_path / "instance").mkdir()
    (tmp_path / "instance" / "x.alb").write_bytes(b"\xef\xbb\xbf<cycle time>\n7\n")
    assert DirectoryCatalog(tmp_path).instance_text("x").startswith("<cycle time>")

def test_fetch_first_available_skips_missing(tmp_path):
    ensure_assets_exist(str(tmp_path))
    name, text = fetch_first_available(DirectoryCatalog(tmp_path), ["gone", "i2"])
    assert name == "i2"
    assert "<task times>" in text

def test_fetch_first_available_errors(tmp_path):
    cat = DirectoryCatalog(tmp_path)
    with pytest.raises(ResourceUnavailableError):
        fetch_first_available(cat, ["gone", "also_gone"])
    with pytest.raises(CatalogEmptyError):
        fetch_first_available(cat, [])
