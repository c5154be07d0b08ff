"""Core data models for fission-spec.

Defines the typed records persisted into a spec directory:

- **TypeMeta**: the ``apiVersion`` / ``kind`` pair shared by spec resources
- **DeploymentConfig**: the per-directory record carrying the deployment UID
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

SPEC_API_VERSION = "fission.io/v1"
DEPLOYMENT_CONFIG_KIND = "DeploymentConfig"


def generate_uid() -> str:
    """Generate a fresh deployment identifier (canonical UUID-v4 string)."""
    return str(uuid.uuid4())


@dataclass(frozen=True)
class TypeMeta:
    """Resource type header written at the top of every spec document."""

    api_version: str = SPEC_API_VERSION
    kind: str = DEPLOYMENT_CONFIG_KIND


@dataclass(frozen=True)
class DeploymentConfig:
    """Identity of a spec directory.

    Every resource applied from the directory is annotated with ``uid``.
    That annotation is what lets repeated applies stay idempotent and lets
    resources be deleted once their spec is removed, so the UID must never
    change after it is written.
    """

    name: str
    uid: str = field(default_factory=generate_uid)
    api_version: str = SPEC_API_VERSION
    kind: str = DEPLOYMENT_CONFIG_KIND

    @property
    def type_meta(self) -> TypeMeta:
        return TypeMeta(api_version=self.api_version, kind=self.kind)

    def to_dict(self) -> dict[str, str]:
        """Return the wire representation using the serialized key names."""
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "name": self.name,
            "uid": self.uid,
        }


__all__ = [
    "DEPLOYMENT_CONFIG_KIND",
    "SPEC_API_VERSION",
    "DeploymentConfig",
    "TypeMeta",
    "generate_uid",
]
