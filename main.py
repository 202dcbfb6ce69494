#!/usr/bin/env python3
"""
Preflight - cluster compatibility probes.
Run before applying operator configuration to a Kubernetes cluster.
"""

import argparse
import json
import logging
import sys
from dataclasses import replace
from typing import List, Optional

logger = logging.getLogger("preflight")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def run_jwt_policy(cfg, *, no_cluster: bool = False, dump_json: bool = False) -> None:
    """Print the JWT policy the cluster supports."""
    from preflight.checks.jwt_policy import detect_supported_jwt_policy
    from preflight.providers.k8s_provider import new_discovery_client

    discovery = None if no_cluster else new_discovery_client(cfg)
    policy = detect_supported_jwt_policy(discovery)
    if dump_json:
        print(json.dumps({"jwtPolicy": policy.value}))
        return
    print(policy.value)


def run_validate_ca(cfg, values_file: str, *, dump_json: bool = False) -> None:
    """Validate CA settings from a values file (or IstioOperator) against the cluster."""
    from preflight.checks.ca_config import validate_iop_ca_config
    from preflight.core.values import load_values_file
    from preflight.providers.k8s_provider import new_discovery_client

    if cfg.force:
        logger.warning("Skipping CA configuration validation (--force)")
    else:
        values = load_values_file(values_file)
        validate_iop_ca_config(new_discovery_client(cfg), values)
    if dump_json:
        print(json.dumps({"ok": True, "skipped": cfg.force}))
        return
    print("CA configuration OK" if not cfg.force else "CA configuration check skipped")


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    from preflight.config import load_preflight_config
    from preflight.errors import PreflightError

    parser = argparse.ArgumentParser(
        description="Check cluster compatibility before applying operator configuration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Which JWT policy does the current cluster support?
  python main.py --jwt-policy

  # Validate pilotCertProvider in an IstioOperator or values file
  python main.py --validate-ca --values iop.yaml
        """,
    )

    parser.add_argument("--jwt-policy", action="store_true", help="Detect the supported service account JWT policy")
    parser.add_argument(
        "--validate-ca", action="store_true", help="Validate global.pilotCertProvider against the server version"
    )
    parser.add_argument("--values", metavar="FILE", help="Values file or IstioOperator YAML (used with --validate-ca)")
    parser.add_argument("--force", action="store_true", help="Skip the CA configuration validation")
    parser.add_argument(
        "--no-cluster",
        action="store_true",
        help="Do not contact a cluster; --jwt-policy then reports third-party-jwt",
    )

    # Connection options
    parser.add_argument("--kubeconfig", help="Path to kubeconfig (default: $PREFLIGHT_KUBECONFIG, $KUBECONFIG)")
    parser.add_argument("--context", help="Kubeconfig context to use (default: current-context)")
    parser.add_argument("--in-cluster", action="store_true", help="Use the in-cluster service account")

    parser.add_argument("--dump-json", action="store_true", help="Print the result as JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)

    cfg = load_preflight_config()
    cfg = replace(
        cfg,
        kubeconfig=args.kubeconfig or cfg.kubeconfig,
        context=args.context or cfg.context,
        in_cluster=args.in_cluster or cfg.in_cluster,
        force=args.force or cfg.force,
        log_level="DEBUG" if args.verbose else cfg.log_level,
    )
    _configure_logging(cfg.log_level)

    try:
        if args.jwt_policy:
            run_jwt_policy(cfg, no_cluster=args.no_cluster, dump_json=args.dump_json)
            return 0

        if args.validate_ca:
            if not args.values:
                parser.error("--validate-ca requires --values FILE")
            run_validate_ca(cfg, args.values, dump_json=args.dump_json)
            return 0

        # No arguments provided
        parser.print_help()
        return 0

    except PreflightError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
