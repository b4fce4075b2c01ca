import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

from vdigest import Digestor, DetailSignature, InMemoryLookup, TrackerStrategy

from tests.infrastructure.views import VIEWS


@pytest.fixture(autouse=True)
def _no_cache_override(monkeypatch):
    # переменная окружения перекрывает настройку кэша, в тестах она не нужна
    monkeypatch.delenv("VD_DIGEST_CACHE", raising=False)


@pytest.fixture(params=list(TrackerStrategy), ids=lambda s: s.value)
def strategy(request) -> TrackerStrategy:
    """Обе стратегии извлечения зависимостей должны давать одинаковый результат."""
    return request.param


@pytest.fixture
def views() -> InMemoryLookup:
    return InMemoryLookup(VIEWS)


@pytest.fixture
def details() -> DetailSignature:
    return DetailSignature()


@pytest.fixture
def digestor(views, strategy) -> Digestor:
    return Digestor(views, strategy=strategy)


def run_cli(root: Path, *args: str) -> subprocess.CompletedProcess:
    env = os.environ.copy()
    env.pop("VD_DIGEST_CACHE", None)
    return subprocess.run(
        [sys.executable, "-m", "vdigest.cli", *args],
        cwd=root, env=env, capture_output=True, text=True, encoding="utf-8"
    )


def jload(s: str):
    return json.loads(s)
