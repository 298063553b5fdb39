"""Data models shared by the configuration, the backends and the updater.

These are pure data structures: nothing here talks to GitLab, a package
registry or the filesystem.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, SecretStr


class UnlockStrategy(Enum):
    """How far a backend may edit requirement strings to reach a new version."""

    NONE = "none"
    OWN = "own"
    ALL = "all"


class RequirementsUpdateStrategy(Enum):
    """Requirement rewriting policy understood by the backends."""

    BUMP_VERSIONS = "bump_versions"
    BUMP_VERSIONS_IF_NECESSARY = "bump_versions_if_necessary"
    LOCKFILE_ONLY = "lockfile_only"
    WIDEN_RANGES = "widen_ranges"


@dataclass(frozen=True)
class Source:
    """The hosted repository a run operates on."""

    provider: str
    hostname: str
    api_endpoint: str
    repo: str
    directory: str = "/"
    branch: str | None = None


SECRET_MASK = "**********"

# Extra credential keys that locate a registry rather than authenticate to it.
_PUBLIC_EXTRA_KEYS = frozenset({"registry", "url", "organization", "replaces-base"})


class Credential(BaseModel):
    """A credential handed to the backend.

    Unknown keys are kept as-is: registry credentials carry fields such as
    ``registry`` or ``token`` that only the backend understands. Unknown keys
    other than the registry locators are treated as secrets and masked in
    ``repr`` and :meth:`redacted`.
    """

    model_config = ConfigDict(extra="allow")

    type: str = Field(..., min_length=1, description="Credential kind, e.g. 'git_source'.")
    host: str | None = Field(default=None, description="Host the credential applies to.")
    username: str | None = Field(default=None)
    password: SecretStr | None = Field(default=None)

    def as_dict(self) -> dict[str, Any]:
        """Plain mapping with the secret revealed, for the backend boundary only."""
        data = self.model_dump()
        data["password"] = self.password.get_secret_value() if self.password else None
        return data

    def redacted(self) -> dict[str, Any]:
        """JSON-safe mapping for display, with every secret masked."""
        data = self.model_dump(mode="json")
        for key in self._secret_extra_keys():
            if data.get(key) is not None:
                data[key] = SECRET_MASK
        return data

    def _secret_extra_keys(self) -> list[str]:
        return [k for k in (self.model_extra or {}) if k not in _PUBLIC_EXTRA_KEYS]

    def __repr_args__(self):
        secret = set(self._secret_extra_keys())
        for key, value in super().__repr_args__():
            yield key, (SECRET_MASK if key in secret and value is not None else value)


@dataclass
class DependencyFile:
    """A manifest or lockfile fetched from the source repository."""

    name: str
    content: str
    directory: str = "/"


@dataclass
class Dependency:
    """A dependency declared in the fetched files."""

    name: str
    version: str | None
    package_manager: str
    requirements: list[dict[str, Any]] = field(default_factory=list)
    top_level: bool = True


@dataclass
class UpdatedDependency:
    """A dependency together with the version it should be moved to."""

    name: str
    version: str | None
    previous_version: str | None
    package_manager: str
    requirements: list[dict[str, Any]] = field(default_factory=list)
    previous_requirements: list[dict[str, Any]] = field(default_factory=list)
