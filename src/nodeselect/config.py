"""Configuration loader for nodeselect.

Settings live in a TOML file, by default ``<vault>/.nodeselect.toml``::

    [nodeselect]
    vault_dir       = "~/notes"
    search_function = "nodeselect.search:ripgrep_search"
    provider        = "nodeselect.providers:FuzzyPromptProvider"
    rg_args         = ["--line-number", "--no-heading", "--color=never", "--smart-case"]
    editor          = "nvim"
    preview_lines   = 15
    mode            = true      # enable the prompt override at startup

``search_function`` and ``provider`` are ``module:attr`` entry points,
resolved with :func:`resolve_callable`.  The ``NODESELECT_VAULT``
environment variable takes precedence over ``vault_dir``.
"""

from __future__ import annotations

import importlib
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

from nodeselect.errors import ConfigError

CONFIG_FILENAME = ".nodeselect.toml"
DEFAULT_RG_ARGS = ["--line-number", "--no-heading", "--color=never", "--smart-case"]


@dataclass
class Config:
    vault_dir: Path = Path(".")
    search_function: str = "nodeselect.search:ripgrep_search"
    provider: str = "nodeselect.providers:FuzzyPromptProvider"
    rg_args: list[str] = field(default_factory=lambda: list(DEFAULT_RG_ARGS))
    editor: str = field(default_factory=lambda: os.environ.get("EDITOR", "vi"))
    preview_lines: int = 15
    mode: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        section = data.get("nodeselect", data)
        unknown = set(section) - {f for f in cls.__dataclass_fields__}
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        kwargs = dict(section)
        if "vault_dir" in kwargs:
            kwargs["vault_dir"] = Path(kwargs["vault_dir"]).expanduser()
        if "rg_args" in kwargs and not isinstance(kwargs["rg_args"], list):
            raise ConfigError("rg_args must be a list of strings")
        if "preview_lines" in kwargs and not isinstance(kwargs["preview_lines"], int):
            raise ConfigError("preview_lines must be an integer")
        return cls(**kwargs)


def load_config(path: Path | None = None, vault_dir: Path | None = None) -> Config:
    """Load configuration from *path* (or the vault's config file if present).

    A missing file yields the defaults.  An explicit *vault_dir* wins over
    ``NODESELECT_VAULT``, which wins over the file's ``vault_dir``.
    """
    env_vault = os.environ.get("NODESELECT_VAULT")
    base = Path(vault_dir or env_vault or ".")
    config_path = Path(path) if path else base / CONFIG_FILENAME

    data: dict[str, Any] = {}
    if config_path.exists():
        try:
            with open(config_path, "rb") as fh:
                data = tomllib.load(fh)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in {config_path}: {exc}") from exc
    elif path:
        raise ConfigError(f"Config file not found: {config_path}")
    config = Config.from_dict(data)

    if vault_dir or env_vault or "vault_dir" not in data.get("nodeselect", data):
        config.vault_dir = base
    return config


def resolve_callable(entry: str) -> Callable[..., Any]:
    """Import ``module:attr`` (or ``module.attr``) and return the attribute."""
    module_name, sep, attr = entry.partition(":")
    if not sep:
        module_name, _, attr = entry.rpartition(".")
    if not module_name or not attr:
        raise ConfigError(f"Entry point '{entry}' must look like 'package.module:function'.")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigError(f"Cannot import '{module_name}' for entry point '{entry}': {exc}") from exc
    target = getattr(module, attr, None)
    if not callable(target):
        raise ConfigError(f"Module '{module_name}' has no callable '{attr}'.")
    return target
