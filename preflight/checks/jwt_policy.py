"""Detect which service account token mechanism the API server supports."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from preflight.core.models import (
    AUTHENTICATION_V1,
    TOKEN_REQUEST_RESOURCE,
    APIResourceList,
    JWTPolicy,
    PartialDiscoveryFailure,
    TotalDiscoveryFailure,
)
from preflight.errors import DiscoveryFailedError, GroupDiscoveryFailedError
from preflight.providers.k8s_provider import DiscoveryClient

logger = logging.getLogger(__name__)


def _has_token_request(resources: Iterable[APIResourceList]) -> bool:
    for rl in resources:
        for api in rl.resources:
            if api.name == TOKEN_REQUEST_RESOURCE:
                return True
    return False


def detect_supported_jwt_policy(discovery: Optional[DiscoveryClient]) -> JWTPolicy:
    """
    Query the API server for TokenRequest support.

    - No discovery client (nothing to probe, e.g. offline rendering) -> third-party.
    - `serviceaccounts/token` served anywhere -> third-party.
    - Otherwise -> first-party.

    A partial discovery failure only matters when authentication.k8s.io/v1 is
    among the failed groups; any other failed group is ignored and the
    resources that did load are scanned.
    """
    if discovery is None:
        return JWTPolicy.THIRD_PARTY

    result = discovery.server_groups_and_resources()

    if isinstance(result, TotalDiscoveryFailure):
        raise DiscoveryFailedError(f"Failed to discover server resources: {result.cause}", cause=result.cause)

    if isinstance(result, PartialDiscoveryFailure):
        if AUTHENTICATION_V1 in result.failed_groups:
            raise GroupDiscoveryFailedError(result.describe(), groups=result.failed_groups)
        logger.debug("Ignoring unrelated discovery failures: %s", result.describe())

    if _has_token_request(result.resources):
        return JWTPolicy.THIRD_PARTY
    return JWTPolicy.FIRST_PARTY
