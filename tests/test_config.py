"""Unit tests for configuration models (create_ps.config)."""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from create_ps.config import Config, ConflictPolicy, RemoteConfig


class TestDefaults:
    @pytest.mark.unit
    def test_config_defaults(self):
        cfg = Config()
        assert cfg.manifest_name == "package.json"
        assert cfg.package_manager == "npm"
        assert cfg.user_name == ""
        assert cfg.conflict_policy is ConflictPolicy.SKIP
        assert cfg.confirm_changes is True
        assert cfg.run_pkg_fix is False
        assert cfg.command_timeout == 300

    @pytest.mark.unit
    def test_remote_defaults(self):
        remote = RemoteConfig()
        assert remote.licenses_url == "https://api.github.com/licenses"
        assert remote.registry_url == "https://registry.npmjs.org"
        assert remote.gitignore_url.endswith("/Node.gitignore")
        assert "contributor-covenant.org" in remote.code_of_conduct_url
        assert remote.timeout == 30

    @pytest.mark.unit
    def test_command_timeout_lower_bound(self):
        with pytest.raises(ValidationError):
            Config(command_timeout=5)

    @pytest.mark.unit
    def test_remote_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            RemoteConfig(timeout=0)


class TestFromEnv:
    @pytest.mark.unit
    def test_empty_environment_gives_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            cfg = Config.from_env()
        assert cfg == Config()

    @pytest.mark.unit
    def test_reads_every_variable(self):
        env = {
            "CREATE_PS_USER_NAME": "Ada Lovelace",
            "CREATE_PS_CONFLICT_POLICY": " ABORT ",
            "CREATE_PS_PACKAGE_MANAGER": "pnpm",
            "CREATE_PS_COMMAND_TIMEOUT": "60",
            "CREATE_PS_LICENSES_URL": "https://licenses.test",
            "CREATE_PS_REGISTRY_URL": "https://registry.test",
            "CREATE_PS_GITIGNORE_URL": "https://templates.test/gitignore",
            "CREATE_PS_COC_URL": "https://templates.test/coc.md",
            "CREATE_PS_HTTP_TIMEOUT": "5",
        }
        with patch.dict(os.environ, env, clear=True):
            cfg = Config.from_env()

        assert cfg.user_name == "Ada Lovelace"
        assert cfg.conflict_policy is ConflictPolicy.ABORT
        assert cfg.package_manager == "pnpm"
        assert cfg.command_timeout == 60
        assert cfg.remote.licenses_url == "https://licenses.test"
        assert cfg.remote.registry_url == "https://registry.test"
        assert cfg.remote.gitignore_url == "https://templates.test/gitignore"
        assert cfg.remote.code_of_conduct_url == "https://templates.test/coc.md"
        assert cfg.remote.timeout == 5

    @pytest.mark.unit
    def test_unknown_conflict_policy_rejected(self):
        with patch.dict(os.environ, {"CREATE_PS_CONFLICT_POLICY": "merge"}, clear=True):
            with pytest.raises(ValueError):
                Config.from_env()

