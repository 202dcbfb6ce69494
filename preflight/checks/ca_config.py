"""Gate pilotCertProvider values on the server version."""

from __future__ import annotations

import logging

from preflight.core.values import ValuesLike, as_values_tree
from preflight.errors import FORCE_HINT, UnsupportedConfigurationError, VersionQueryError
from preflight.providers.k8s_provider import DiscoveryClient

logger = logging.getLogger(__name__)

# The legacy in-cluster signer behind this provider was removed in Kubernetes 1.22.
LEGACY_SIGNER_PROVIDER = "kubernetes"
LEGACY_SIGNER_LAST_MINOR = 21


def legacy_signer_unsupported(major: int, minor: int) -> bool:
    # Literal gate: any minor >= 22 or any major above 1.
    return minor > LEGACY_SIGNER_LAST_MINOR or major > 1


def validate_iop_ca_config(discovery: DiscoveryClient, values: ValuesLike) -> None:
    """
    Validate that the CA settings in `values` are usable on the cluster.

    Missing or mis-shaped `global` / `global.pilotCertProvider` means the
    defaults apply and is never an error. Only `kubernetes` is checked; every
    other provider value passes without a server query.
    """
    global_values = as_values_tree(values).get_mapping("global")
    if global_values is None:
        return
    ca = global_values.get_string("pilotCertProvider")
    if ca != LEGACY_SIGNER_PROVIDER:
        return

    try:
        version = discovery.server_version()
    except Exception as e:
        raise VersionQueryError(f"failed to determine support for K8s legacy signer. {FORCE_HINT}: {e}") from e

    major = version.major_number
    minor = version.minor_number
    logger.debug("Server version major=%r minor=%r parsed as %d.%d", version.major, version.minor, major, minor)

    if legacy_signer_unsupported(major, minor):
        raise UnsupportedConfigurationError(
            f"configuration PILOT_CERT_PROVIDER={ca} not supported in k8s minor version {minor}. "
            f"Please pick another value for PILOT_CERT_PROVIDER. {FORCE_HINT}.",
            value=ca,
            major=major,
            minor=minor,
        )
