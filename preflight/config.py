from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


def _env_bool(name: str, default: bool = False) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "y", "on")


def _env_str(name: str) -> Optional[str]:
    return (os.getenv(name, "") or "").strip() or None


@dataclass(frozen=True)
class PreflightConfig:
    # Cluster connection
    kubeconfig: Optional[str]  # None: client default (~/.kube/config)
    context: Optional[str]  # None: current-context
    in_cluster: bool
    request_timeout_seconds: float

    # Checks
    force: bool  # skip the CA config validation

    log_level: str


@lru_cache(maxsize=1)
def load_preflight_config() -> PreflightConfig:
    """
    Load preflight configuration from environment variables.

    PREFLIGHT_KUBECONFIG falls back to KUBECONFIG. Timeouts below one second are
    raised to one second.
    """
    raw_timeout = (os.getenv("PREFLIGHT_REQUEST_TIMEOUT_SECONDS", "") or "10").strip() or "10"
    try:
        timeout = float(raw_timeout)
    except ValueError:
        timeout = 10.0
    if timeout < 1:
        timeout = 1.0

    return PreflightConfig(
        kubeconfig=_env_str("PREFLIGHT_KUBECONFIG") or _env_str("KUBECONFIG"),
        context=_env_str("PREFLIGHT_KUBE_CONTEXT"),
        in_cluster=_env_bool("PREFLIGHT_IN_CLUSTER"),
        request_timeout_seconds=timeout,
        force=_env_bool("PREFLIGHT_FORCE"),
        log_level=(_env_str("PREFLIGHT_LOG_LEVEL") or "INFO").upper(),
    )
