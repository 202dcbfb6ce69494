"""Tests for pilotCertProvider validation against the server version."""

from __future__ import annotations

from typing import Optional

import pytest

from preflight.checks.ca_config import legacy_signer_unsupported, validate_iop_ca_config
from preflight.core.models import ServerVersion
from preflight.core.values import ValuesTree
from preflight.errors import UnsupportedConfigurationError, VersionQueryError


class _FakeVersion:
    def __init__(self, major: str = "1", minor: str = "21", error: Optional[Exception] = None):
        self.major = major
        self.minor = minor
        self.error = error
        self.calls = 0

    def server_groups_and_resources(self):  # pragma: no cover - not used here
        raise AssertionError("discovery should not be called")

    def server_version(self) -> ServerVersion:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return ServerVersion(major=self.major, minor=self.minor)


def _values(provider) -> dict:
    return {"global": {"pilotCertProvider": provider}}


@pytest.mark.parametrize(
    "values",
    [
        {},
        {"global": None},
        {"global": "istiod"},
        {"global": ["pilotCertProvider"]},
        {"global": {}},
        {"global": {"pilotCertProvider": None}},
        {"global": {"pilotCertProvider": 3}},
        {"global": {"pilotCertProvider": {"name": "kubernetes"}}},
        {"global": {"pilotCertProvider": "istiod"}},
        {"global": {"pilotCertProvider": "custom-ca"}},
        None,
    ],
)
def test_defaults_and_other_providers_skip_the_server(values) -> None:
    fake = _FakeVersion(major="1", minor="30")
    validate_iop_ca_config(fake, values)
    assert fake.calls == 0


def test_kubernetes_provider_allowed_before_1_22() -> None:
    fake = _FakeVersion(major="1", minor="21")
    validate_iop_ca_config(fake, _values("kubernetes"))
    assert fake.calls == 1


def test_kubernetes_provider_rejected_at_1_22() -> None:
    with pytest.raises(UnsupportedConfigurationError) as e:
        validate_iop_ca_config(_FakeVersion(major="1", minor="22"), _values("kubernetes"))
    msg = str(e.value)
    assert "PILOT_CERT_PROVIDER=kubernetes" in msg
    assert "minor version 22" in msg
    assert "--force" in msg
    assert e.value.value == "kubernetes"
    assert (e.value.major, e.value.minor) == (1, 22)


def test_kubernetes_provider_rejected_on_major_2() -> None:
    with pytest.raises(UnsupportedConfigurationError) as e:
        validate_iop_ca_config(_FakeVersion(major="2", minor="0"), _values("kubernetes"))
    assert "minor version 0" in str(e.value)


def test_managed_control_plane_minor_suffix_is_parsed() -> None:
    # EKS-style "22+" counts as 22.
    with pytest.raises(UnsupportedConfigurationError):
        validate_iop_ca_config(_FakeVersion(major="1", minor="22+"), _values("kubernetes"))
    validate_iop_ca_config(_FakeVersion(major="1", minor="21-gke.100"), _values("kubernetes"))


def test_non_numeric_version_degrades_to_zero() -> None:
    validate_iop_ca_config(_FakeVersion(major="one", minor="beta"), _values("kubernetes"))


def test_version_query_failure_mentions_force() -> None:
    fake = _FakeVersion(error=ConnectionError("dial tcp 10.0.0.1:443: i/o timeout"))
    with pytest.raises(VersionQueryError) as e:
        validate_iop_ca_config(fake, _values("kubernetes"))
    assert "--force" in str(e.value)
    assert "i/o timeout" in str(e.value)
    assert isinstance(e.value.__cause__, ConnectionError)


def test_accepts_values_tree() -> None:
    with pytest.raises(UnsupportedConfigurationError):
        validate_iop_ca_config(_FakeVersion(minor="25"), ValuesTree(_values("kubernetes")))


def test_values_are_not_mutated() -> None:
    values = _values("kubernetes")
    validate_iop_ca_config(_FakeVersion(minor="20"), values)
    assert values == {"global": {"pilotCertProvider": "kubernetes"}}


@pytest.mark.parametrize(
    "major,minor,expected",
    [
        (1, 21, False),
        (1, 22, True),
        (1, 99, True),
        (2, 0, True),
        (0, 0, False),
    ],
)
def test_legacy_signer_gate(major: int, minor: int, expected: bool) -> None:
    assert legacy_signer_unsupported(major, minor) is expected
