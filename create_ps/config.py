"""create-ps configuration.

Centralised, typed configuration for both commands. All settings use
Pydantic v2 models so they can be validated at construction time and
serialised to/from JSON or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ConflictPolicy(str, Enum):
    """What the user is asked when selected outputs already exist.

    ``SKIP`` asks whether to skip the colliding features (declining means
    they are overwritten). ``ABORT`` asks whether to continue at all
    (declining ends the run before anything is written).
    """

    SKIP = "skip"
    ABORT = "abort"


class RemoteConfig(BaseModel):
    """Endpoints used to fetch templates and validate dependencies."""

    licenses_url: str = Field(default="https://api.github.com/licenses")
    registry_url: str = Field(default="https://registry.npmjs.org")
    gitignore_url: str = Field(
        default="https://raw.githubusercontent.com/github/gitignore/main/Node.gitignore"
    )
    code_of_conduct_url: str = Field(
        default=(
            "https://www.contributor-covenant.org/version/2/0/"
            "code_of_conduct/code_of_conduct.md"
        )
    )
    timeout: int = Field(default=30, ge=1, description="Per-request timeout in seconds")


class Config(BaseModel):
    """Global create-ps configuration.

    Instances are created once by the CLI entry point and then passed
    through the pipeline, the scaffolding engine and the config-update flow.
    """

    remote: RemoteConfig = Field(default_factory=RemoteConfig)
    manifest_name: str = Field(default="package.json")
    package_manager: str = Field(default="npm")
    user_name: str = Field(default="", description="Substituted into license text")
    conflict_policy: ConflictPolicy = Field(default=ConflictPolicy.SKIP)
    confirm_changes: bool = Field(
        default=True, description="Ask before writing pkg-config changes"
    )
    run_pkg_fix: bool = Field(
        default=False, description="Run '<package_manager> pkg fix' after pkg-config"
    )
    command_timeout: int = Field(
        default=300, ge=10, description="External command timeout in seconds"
    )

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            CREATE_PS_USER_NAME, CREATE_PS_CONFLICT_POLICY,
            CREATE_PS_PACKAGE_MANAGER, CREATE_PS_COMMAND_TIMEOUT,
            CREATE_PS_LICENSES_URL, CREATE_PS_REGISTRY_URL,
            CREATE_PS_GITIGNORE_URL, CREATE_PS_COC_URL, CREATE_PS_HTTP_TIMEOUT.
        """
        remote_kwargs: dict[str, Any] = {}
        if os.environ.get("CREATE_PS_LICENSES_URL"):
            remote_kwargs["licenses_url"] = os.environ["CREATE_PS_LICENSES_URL"]
        if os.environ.get("CREATE_PS_REGISTRY_URL"):
            remote_kwargs["registry_url"] = os.environ["CREATE_PS_REGISTRY_URL"]
        if os.environ.get("CREATE_PS_GITIGNORE_URL"):
            remote_kwargs["gitignore_url"] = os.environ["CREATE_PS_GITIGNORE_URL"]
        if os.environ.get("CREATE_PS_COC_URL"):
            remote_kwargs["code_of_conduct_url"] = os.environ["CREATE_PS_COC_URL"]
        if os.environ.get("CREATE_PS_HTTP_TIMEOUT"):
            remote_kwargs["timeout"] = int(os.environ["CREATE_PS_HTTP_TIMEOUT"])

        kwargs: dict[str, Any] = {}
        if os.environ.get("CREATE_PS_USER_NAME"):
            kwargs["user_name"] = os.environ["CREATE_PS_USER_NAME"]
        if os.environ.get("CREATE_PS_CONFLICT_POLICY"):
            kwargs["conflict_policy"] = ConflictPolicy(
                os.environ["CREATE_PS_CONFLICT_POLICY"].strip().lower()
            )
        if os.environ.get("CREATE_PS_PACKAGE_MANAGER"):
            kwargs["package_manager"] = os.environ["CREATE_PS_PACKAGE_MANAGER"]
        if os.environ.get("CREATE_PS_COMMAND_TIMEOUT"):
            kwargs["command_timeout"] = int(os.environ["CREATE_PS_COMMAND_TIMEOUT"])

        return cls(remote=RemoteConfig(**remote_kwargs), **kwargs)
