"""
Pytest config.

Tests import the local `preflight/` package and `main.py` from the repo root. Pin the
root on sys.path so a global `pytest` entrypoint collects them without an install.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def _ensure_repo_root_on_syspath() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    repo_root_str = str(repo_root)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)


_ensure_repo_root_on_syspath()


@pytest.fixture(autouse=True)
def _fresh_preflight_config(monkeypatch: pytest.MonkeyPatch):
    """
    `load_preflight_config` is cached for the process lifetime. Clear the cache around
    each test and drop ambient PREFLIGHT_* / KUBECONFIG vars so results don't depend
    on the developer's shell.
    """
    from preflight.config import load_preflight_config

    for name in (
        "PREFLIGHT_KUBECONFIG",
        "KUBECONFIG",
        "PREFLIGHT_KUBE_CONTEXT",
        "PREFLIGHT_IN_CLUSTER",
        "PREFLIGHT_REQUEST_TIMEOUT_SECONDS",
        "PREFLIGHT_FORCE",
        "PREFLIGHT_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    load_preflight_config.cache_clear()
    yield
    load_preflight_config.cache_clear()
