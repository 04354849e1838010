"""
Retrieval of instance and reference-solution text.

Both catalogs share one layout:
    instance/list.json     JSON array of instance names (".alb" optional)
    instance/<name>.alb    instance text
    soluce/<name>.sol      reference solution text
Any failure to retrieve is reported as ResourceUnavailableError.
"""
from __future__ import annotations
import json
import logging
import random
from pathlib import Path
from typing import List, Optional, Tuple

import requests

from .constants import (
    CATALOG_FILE, INSTANCE_DIR, INSTANCE_SUFFIX, SOLUTION_DIR, SOLUTION_SUFFIX, strip_suffix,
)
from .errors import CatalogEmptyError, ResourceUnavailableError
from .models import AppConfig

logger = logging.getLogger(__name__)


def _names_from_json(raw: str, resource: str) -> List[str]:
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise ResourceUnavailableError(resource, f"invalid JSON ({e})") from e
    if not isinstance(data, list):
        raise ResourceUnavailableError(resource, "expected a JSON array of names")
    return [strip_suffix(str(n)) for n in data if str(n).strip()]


class DirectoryCatalog:
    def __init__(self, root):
        self.root = Path(root)

    def _read(self, rel: str) -> str:
        path = self.root / rel
        try:
            return path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Cannot read %s: %s", path, e)
            raise ResourceUnavailableError(rel, str(e)) from e

    def list_instances(self) -> List[str]:
        rel = f"{INSTANCE_DIR}/{CATALOG_FILE}"
        return _names_from_json(self._read(rel), rel)

    def instance_text(self, name: str) -> str:
        return self._read(f"{INSTANCE_DIR}/{strip_suffix(name)}{INSTANCE_SUFFIX}")

    def solution_text(self, name: str) -> str:
        return self._read(f"{SOLUTION_DIR}/{strip_suffix(name)}{SOLUTION_SUFFIX}")


class HttpCatalog:
    def __init__(self, base_url: str, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _get(self, rel: str) -> str:
        url = f"{self.base_url}/{rel}"
        try:
            resp = requests.get(url, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.warning("GET %s failed: %s", url, e)
            raise ResourceUnavailableError(rel, str(e)) from e
        return resp.text

    def list_instances(self) -> List[str]:
        rel = f"{INSTANCE_DIR}/{CATALOG_FILE}"
        return _names_from_json(self._get(rel), rel)

    def instance_text(self, name: str) -> str:
        return self._get(f"{INSTANCE_DIR}/{strip_suffix(name)}{INSTANCE_SUFFIX}")

    def solution_text(self, name: str) -> str:
        return self._get(f"{SOLUTION_DIR}/{strip_suffix(name)}{SOLUTION_SUFFIX}")


def catalog_from_config(cfg: AppConfig):
    if cfg.catalog_kind == "http":
        return HttpCatalog(cfg.base_url, timeout=cfg.request_timeout)
    return DirectoryCatalog(cfg.catalog_root)


def pick_other_instance(names: List[str], current: Optional[str], rng: Optional[random.Random] = None) -> str:
    """Random name different from `current`; `current` itself when it is the only one."""
    if not names:
        raise CatalogEmptyError("Graph list is empty.")
    rng = rng or random.Random()
    others = [n for n in names if n != current]
    if not others:
        return current
    return rng.choice(others)


def fetch_first_available(catalog, candidates: List[str]) -> Tuple[str, str]:
    """(name, instance text) for the first candidate the catalog can serve."""
    last_error: Optional[ResourceUnavailableError] = None
    for name in candidates:
        try:
            return name, catalog.instance_text(name)
        except ResourceUnavailableError as e:
            logger.warning("Instance %s unavailable: %s", name, e)
            last_error = e
    if last_error is None:
        raise CatalogEmptyError("No instance to load.")
    raise last_error
