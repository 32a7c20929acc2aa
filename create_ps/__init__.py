"""create-ps -- scaffold the foundations of an npm package.

Quick usage::

    from create_ps import Config, CreatePipeline

    report = await CreatePipeline(Config.from_env()).run(".", "my-package", esm=True)
"""

from create_ps.config import Config, ConflictPolicy, RemoteConfig
from create_ps.config_update import ConfigUpdater
from create_ps.manifest import ManifestEditor, ManifestError
from create_ps.pipeline import CreatePipeline, main, run_pkg_config
from create_ps.prompts import Prompter, UserCancelled
from create_ps.remote import RemoteClient, RemoteError

__version__ = "1.0.0"

__all__ = [
    "Config",
    "ConfigUpdater",
    "ConflictPolicy",
    "CreatePipeline",
    "ManifestEditor",
    "ManifestError",
    "Prompter",
    "RemoteClient",
    "RemoteConfig",
    "RemoteError",
    "UserCancelled",
    "main",
    "run_pkg_config",
]
