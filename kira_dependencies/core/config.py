"""Run configuration, read once from the environment.

Every variable the updater understands is declared on :class:`Settings`.
Parsing is strict: malformed JSON, unknown unlock symbols or update
strategies and a malformed project path all fail before any backend is
touched. Blank values are treated as unset, except ``DEPENDENCIES`` where a
blank value switches the name filter off.
"""

from __future__ import annotations

import json
import re
from typing import Annotated, Any

from pydantic import Field, SecretStr, ValidationError, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict, SettingsError

from kira_dependencies.exceptions import ConfigurationError
from kira_dependencies.models import (
    Credential,
    RequirementsUpdateStrategy,
    Source,
    UnlockStrategy,
)

DEFAULT_DEPENDENCY_FILTER = ["ft", "phplib", "ecom"]

_PROJECT_PATH_RE = re.compile(r"^[\w.-]+(/[\w.-]+)+$")

_GIT_SOURCE_USERNAME = "x-access-token"


class Settings(BaseSettings):
    """Environment-driven configuration for one update run."""

    model_config = SettingsConfigDict(
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    gitlab_hostname: str = Field(
        default="gitlab.com",
        alias="GITLAB_HOSTNAME",
        description="GitLab host the project lives on.",
    )
    github_token: SecretStr | None = Field(
        default=None,
        alias="KIRA_GITHUB_PERSONAL_TOKEN",
        description="GitHub token, used by backends to read github.com sources.",
    )
    gitlab_token: SecretStr | None = Field(
        default=None,
        alias="KIRA_GITLAB_PERSONAL_TOKEN",
        description="GitLab access token with API permission.",
    )
    extra_credentials: Annotated[list[Credential], NoDecode] = Field(
        default_factory=list,
        alias="DEPENDABOT_EXTRA_CREDENTIALS",
        description="JSON array of additional credentials (private registries, ...).",
    )
    ignored_versions: Annotated[dict[str, list[str]], NoDecode] = Field(
        default_factory=dict,
        alias="DEPENDABOT_IGNORED_VERSIONS",
        description='JSON object, e.g. {"vendor/package": [">0.1.0", ">0.2.0"]}.',
    )
    project_path: str = Field(
        ...,
        alias="DEPENDABOT_PROJECT_PATH",
        description="Full path of the project, namespace/project.",
    )
    directory: str = Field(
        default="/",
        alias="DEPENDABOT_DIRECTORY",
        description="Directory holding the dependency files.",
    )
    update_strategy: RequirementsUpdateStrategy | None = Field(
        default=None,
        alias="DEPENDABOT_UPDATE_STRATEGY",
    )
    excluded_requirements: Annotated[frozenset[UnlockStrategy], NoDecode] = Field(
        default_factory=frozenset,
        alias="DEPENDABOT_EXCLUDE_REQUIREMENTS_TO_UNLOCK",
        description="Space-separated unlock strategies never to use (none, own, all).",
    )
    fail_on_exception: bool = Field(
        default=False,
        alias="KIRA_FAIL_ON_EXCEPTION",
        description="'true' aborts on the first error; anything else logs and continues.",
    )
    assignees: Annotated[list[str] | None, NoDecode] = Field(
        default=None,
        alias="DEPENDABOT_ASSIGNEE_GITLAB_ID",
        description="GitLab user id(s) to assign the merge request to.",
    )
    package_manager: str = Field(
        default="bundler",
        alias="PACKAGE_MANAGER",
    )
    source_branch: str | None = Field(
        default=None,
        alias="DEPENDABOT_SOURCE_BRANCH",
        description="Branch to read dependency files from and target with the merge request.",
    )
    dependency_filter: Annotated[list[str] | None, NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_DEPENDENCY_FILTER),
        alias="DEPENDENCIES",
        description="Comma-separated name substrings; blank keeps top-level dependencies only.",
    )

    # ── validators ─────────────────────────────────────────────────────────

    @field_validator("gitlab_hostname", "directory", "package_manager", mode="before")
    @classmethod
    def _blank_to_default(cls, value: Any, info: ValidationInfo) -> Any:
        if isinstance(value, str):
            value = value.strip()
            if not value:
                return cls.model_fields[info.field_name].default
        return value

    @field_validator(
        "github_token", "gitlab_token", "source_branch", "update_strategy", mode="before"
    )
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip() or None
        return value

    @field_validator("extra_credentials", mode="before")
    @classmethod
    def _parse_credentials(cls, value: Any) -> Any:
        value = _load_json(value, default=[])
        if not isinstance(value, list):
            raise ValueError("expected a JSON array of credential objects")
        return value

    @field_validator("ignored_versions", mode="before")
    @classmethod
    def _parse_ignored_versions(cls, value: Any) -> Any:
        value = _load_json(value, default={})
        if not isinstance(value, dict):
            raise ValueError("expected a JSON object mapping dependency names to constraints")
        return value

    @field_validator("project_path", mode="before")
    @classmethod
    def _check_project_path(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip().strip("/")
            if not _PROJECT_PATH_RE.match(value):
                raise ValueError("expected a project path of the form namespace/project")
        return value

    @field_validator("excluded_requirements", mode="before")
    @classmethod
    def _split_requirements(cls, value: Any) -> Any:
        if isinstance(value, str):
            return frozenset(value.split())
        return value

    @field_validator("fail_on_exception", mode="before")
    @classmethod
    def _parse_flag(cls, value: Any) -> Any:
        # Only "true" switches fail-fast on; any other value leaves it off.
        if isinstance(value, str):
            return value.strip().lower() == "true"
        return value

    @field_validator("assignees", mode="before")
    @classmethod
    def _split_assignees(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, (list, tuple)):
            ids = [str(v).strip() for v in value if str(v).strip()]
            return ids or None
        return value

    @field_validator("dependency_filter", mode="before")
    @classmethod
    def _split_filter(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, (list, tuple)):
            parts = [str(v).strip().lower() for v in value if str(v).strip()]
            return parts or None
        return value

    # ── derived values ─────────────────────────────────────────────────────

    def credentials(self) -> list[Credential]:
        """GitHub and GitLab git-source credentials, then the extra ones in order."""
        return [
            Credential(
                type="git_source",
                host="github.com",
                username=_GIT_SOURCE_USERNAME,
                password=self.github_token,
            ),
            Credential(
                type="git_source",
                host=self.gitlab_hostname,
                username=_GIT_SOURCE_USERNAME,
                password=self.gitlab_token,
            ),
            *self.extra_credentials,
        ]

    def source(self) -> Source:
        return Source(
            provider="gitlab",
            hostname=self.gitlab_hostname,
            api_endpoint=f"https://{self.gitlab_hostname}/api/v4",
            repo=self.project_path,
            directory=self.directory,
            branch=self.source_branch,
        )

    def redacted(self) -> dict[str, Any]:
        """Settings keyed by environment variable, secrets masked."""
        data = self.model_dump(mode="json", by_alias=True)
        data["DEPENDABOT_EXTRA_CREDENTIALS"] = [c.redacted() for c in self.extra_credentials]
        data["DEPENDABOT_EXCLUDE_REQUIREMENTS_TO_UNLOCK"] = sorted(
            s.value for s in self.excluded_requirements
        )
        return data


def _load_json(value: Any, *, default: Any) -> Any:
    if value is None:
        return default
    if isinstance(value, str):
        if not value.strip():
            return default
        try:
            return json.loads(value)
        except json.JSONDecodeError as exc:
            raise ValueError(f"invalid JSON: {exc}") from exc
    return value


def load_settings(**values: Any) -> Settings:
    """Build :class:`Settings`, turning validation failures into ConfigurationError."""
    try:
        return Settings(**values)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'settings'}: {err['msg']}"
            for err in exc.errors()
        )
        raise ConfigurationError(f"Invalid configuration: {problems}") from exc
    except SettingsError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc
