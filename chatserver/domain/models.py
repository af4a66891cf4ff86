"""Typed domain models shared across runtime layers.

This module provides simple data contracts for cross-layer communication
between the configuration pipeline, the activator and the HTTP surface.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class BuildInfo:
    """Static build metadata published to clients.

    Attributes:
        version: Semantic server version.
        build_number: CI build number or `dev` for local builds.
        build_date: Human-readable build timestamp.
        build_hash: Source revision the build was produced from.
        enterprise_ready: Whether enterprise components were linked into the build.
    """

    version: str
    build_number: str
    build_date: str
    build_hash: str
    enterprise_ready: bool


@dataclass(frozen=True)
class ConnectivityStatus:
    """Result contract for one external dependency smoke-test.

    Attributes:
        target: Dependency name, for example `database` or `file_storage`.
        status: `ok` when the dependency answered, `down` otherwise.
        detail: Additional message suitable for operational diagnostics.
        label: Redacted connection target for display.
    """

    target: str
    status: str
    detail: str
    label: str = ""

    @property
    def is_ok(self) -> bool:
        return self.status == "ok"
