"""Defensive parsing of server-reported version components."""

from __future__ import annotations

import re
from typing import Optional

_LEADING_DIGITS = re.compile(r"^[0-9]+")


def parse_version_component(text: Optional[str]) -> int:
    """
    Parse a major/minor version component reported by the API server.

    Managed control planes often decorate the numbers (EKS/GKE report minor
    versions like "22+" or "21-gke.1"), so only the leading digits count:

      "22"       -> 22
      "22+"      -> 22
      " 1 "      -> 1
      "", "abc"  -> 0
      None       -> 0

    Never raises; a component with no leading digits is treated as zero.
    """
    if not isinstance(text, str):
        return 0
    m = _LEADING_DIGITS.match(text.strip())
    if not m:
        return 0
    return int(m.group(0))
