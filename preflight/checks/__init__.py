"""Read-only compatibility checks. Each makes a single discovery call and never retries."""

from preflight.checks.ca_config import validate_iop_ca_config
from preflight.checks.jwt_policy import detect_supported_jwt_policy

__all__ = ["detect_supported_jwt_policy", "validate_iop_ca_config"]
