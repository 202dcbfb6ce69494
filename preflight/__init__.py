"""
Cluster compatibility probes run before applying operator configuration.

- `checks.jwt_policy`: which service account token mechanism the API server supports.
- `checks.ca_config`: whether the requested pilotCertProvider works on the server version.
"""
