"""Kubernetes discovery client used by the compatibility checks (read-only)."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

import yaml
from kubernetes import client, config
from kubernetes.client.rest import ApiException

from preflight.config import PreflightConfig, load_preflight_config
from preflight.core.models import (
    APIResource,
    APIResourceList,
    DiscoveryOk,
    DiscoveryResult,
    GroupVersion,
    PartialDiscoveryFailure,
    ServerVersion,
    TotalDiscoveryFailure,
)
from preflight.errors import ClusterConnectionError

logger = logging.getLogger(__name__)


@runtime_checkable
class DiscoveryClient(Protocol):
    def server_groups_and_resources(self) -> DiscoveryResult: ...

    def server_version(self) -> ServerVersion: ...


def _describe_error(e: Exception) -> str:
    # Keep ApiException details (status/reason) instead of the full HTTP dump.
    if isinstance(e, ApiException):
        return f"Kubernetes API error: {e.status} {e.reason}"
    return str(e) or e.__class__.__name__


class KubernetesDiscoveryClient:
    """
    Discovery over an isolated `ApiClient`.

    The ApiClient is owned by the caller; this class never mutates the global
    SDK configuration and never caches discovery results between calls.
    """

    def __init__(self, api_client: client.ApiClient, *, request_timeout: Optional[float] = None):
        self._api_client = api_client
        self._request_timeout = request_timeout

    def _call_kwargs(self) -> Dict[str, Any]:
        if self._request_timeout is None:
            return {}
        return {"_request_timeout": self._request_timeout}

    def served_group_versions(self) -> List[GroupVersion]:
        """List every group version the server advertises (legacy core group first)."""
        out: List[GroupVersion] = []

        core = client.CoreApi(self._api_client).get_api_versions(**self._call_kwargs())
        for v in getattr(core, "versions", None) or []:
            out.append(GroupVersion(group="", version=v))

        groups = client.ApisApi(self._api_client).get_api_versions(**self._call_kwargs())
        for g in getattr(groups, "groups", None) or []:
            for gv in getattr(g, "versions", None) or []:
                out.append(GroupVersion(group=g.name or "", version=gv.version))
        return out

    def resources_for(self, gv: GroupVersion) -> APIResourceList:
        path = f"/api/{gv.version}" if not gv.group else f"/apis/{gv.group}/{gv.version}"
        raw = self._api_client.call_api(
            path,
            "GET",
            header_params={"Accept": "application/json"},
            response_type="V1APIResourceList",
            auth_settings=["BearerToken"],
            _return_http_data_only=True,
            **self._call_kwargs(),
        )
        return APIResourceList(
            group_version=getattr(raw, "group_version", None) or str(gv),
            resources=[
                APIResource(
                    name=r.name,
                    kind=getattr(r, "kind", None),
                    namespaced=getattr(r, "namespaced", None),
                )
                for r in (getattr(raw, "resources", None) or [])
            ],
        )

    def server_groups_and_resources(self) -> DiscoveryResult:
        """
        One discovery pass: list groups, then fetch resources per group version.

        Failures of individual group versions (e.g. an aggregated API service
        that is down) are collected into a PartialDiscoveryFailure alongside the
        resources that did load. Only a failure of the group listing itself is
        a TotalDiscoveryFailure.
        """
        try:
            group_versions = self.served_group_versions()
        except Exception as e:
            logger.debug("Server group discovery failed: %s", e)
            return TotalDiscoveryFailure(cause=_describe_error(e))

        resources: List[APIResourceList] = []
        failed: Dict[GroupVersion, str] = {}
        for gv in group_versions:
            try:
                resources.append(self.resources_for(gv))
            except Exception as e:
                failed[gv] = _describe_error(e)

        if failed:
            logger.debug("Discovery failed for %d group version(s): %s", len(failed), sorted(str(g) for g in failed))
            return PartialDiscoveryFailure(resources=resources, failed_groups=failed)
        return DiscoveryOk(resources=resources)

    def server_version(self) -> ServerVersion:
        info = client.VersionApi(self._api_client).get_code(**self._call_kwargs())
        return ServerVersion(
            major=getattr(info, "major", None) or "",
            minor=getattr(info, "minor", None) or "",
            git_version=getattr(info, "git_version", None),
        )


def new_api_client(cfg: PreflightConfig) -> client.ApiClient:
    """Build an ApiClient bound to one kubeconfig context (or the in-cluster service account)."""
    if cfg.in_cluster:
        configuration = client.Configuration()
        config.load_incluster_config(client_configuration=configuration)
        return client.ApiClient(configuration)
    return config.new_client_from_config(config_file=cfg.kubeconfig, context=cfg.context)


def new_discovery_client(cfg: Optional[PreflightConfig] = None) -> KubernetesDiscoveryClient:
    cfg = cfg or load_preflight_config()
    try:
        api_client = new_api_client(cfg)
    except (config.ConfigException, OSError, ValueError, yaml.YAMLError) as e:
        where = "in-cluster config" if cfg.in_cluster else (cfg.kubeconfig or "default kubeconfig")
        raise ClusterConnectionError(f"Failed to build Kubernetes client from {where}: {e}") from e
    return KubernetesDiscoveryClient(api_client, request_timeout=cfg.request_timeout_seconds)
