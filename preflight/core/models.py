"""Data model shared by the discovery client and the compatibility checks.

Discovery outcomes are modelled as a tagged union so callers branch on `kind`
instead of inspecting exception types:

- `DiscoveryOk`: every served group version was enumerated.
- `PartialDiscoveryFailure`: the group listing worked but some group versions
  could not be enumerated; the resources that did load are still attached.
- `TotalDiscoveryFailure`: the discovery call itself failed.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from preflight.core.versions import parse_version_component


class JWTPolicy(str, Enum):
    """Service account token mechanism in effect on the cluster."""

    FIRST_PARTY = "first-party-jwt"
    THIRD_PARTY = "third-party-jwt"


class GroupVersion(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    group: str = ""
    version: str

    @classmethod
    def parse(cls, group_version: str) -> "GroupVersion":
        # The legacy core group is reported as a bare "v1".
        if "/" not in group_version:
            return cls(group="", version=group_version)
        group, _, version = group_version.partition("/")
        return cls(group=group, version=version)

    def __str__(self) -> str:
        if not self.group:
            return self.version
        return f"{self.group}/{self.version}"


class GroupKind(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    group: str = ""
    kind: str


def gk_string(gk: GroupKind) -> str:
    """Render a GroupKind as `group/kind` (the upstream form is `kind.group`)."""
    return f"{gk.group}/{gk.kind}"


class APIResource(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    kind: Optional[str] = None
    namespaced: Optional[bool] = None


class APIResourceList(BaseModel):
    model_config = ConfigDict(extra="allow")

    group_version: str
    resources: List[APIResource] = Field(default_factory=list)


TOKEN_REQUEST_RESOURCE = "serviceaccounts/token"
AUTHENTICATION_V1 = GroupVersion(group="authentication.k8s.io", version="v1")


class DiscoveryOk(BaseModel):
    kind: Literal["ok"] = "ok"
    resources: List[APIResourceList] = Field(default_factory=list)


class PartialDiscoveryFailure(BaseModel):
    kind: Literal["partial"] = "partial"
    resources: List[APIResourceList] = Field(default_factory=list)
    # Failed group version -> stringified cause.
    failed_groups: Dict[GroupVersion, str] = Field(default_factory=dict)

    def describe(self) -> str:
        parts = [f"{gv}: {cause}" for gv, cause in sorted(self.failed_groups.items(), key=lambda kv: str(kv[0]))]
        return "unable to retrieve the complete list of server APIs: " + ", ".join(parts)


class TotalDiscoveryFailure(BaseModel):
    kind: Literal["total"] = "total"
    cause: str


DiscoveryResult = Annotated[
    Union[DiscoveryOk, PartialDiscoveryFailure, TotalDiscoveryFailure],
    Field(discriminator="kind"),
]


class ServerVersion(BaseModel):
    """Version as reported by `/version`. Components arrive as text (e.g. "22+")."""

    model_config = ConfigDict(extra="allow")

    major: str = ""
    minor: str = ""
    git_version: Optional[str] = None

    @property
    def major_number(self) -> int:
        return parse_version_component(self.major)

    @property
    def minor_number(self) -> int:
        return parse_version_component(self.minor)
