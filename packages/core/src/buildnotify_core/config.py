import os
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG: dict = {
    "jenkins_url": "",  # prepended to every build's relative URL
    "repo_base_url": None,  # None = no commit/compare links; e.g. "https://github.com/org/repo/"
    "room": None,  # default room when a project does not name its own
    "server": "api.hipchat.com",
    "sender": "Jenkins",
    "notify": False,
    "backend": "hipchat",  # "hipchat" or "console"
    "timeout": 10,
}

BACKENDS = ("hipchat", "console")


class ConfigError(ValueError):
    """Raised when the notifier configuration cannot be used as given."""


def load_config(config_path: str = ".buildnotify.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .buildnotify.yml in the current directory
      3. CLI argument overrides
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        if not isinstance(file_config, dict):
            raise ConfigError(f"{config_path} must contain a mapping, got {type(file_config).__name__}")
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    # YAML reads numeric room IDs as ints.
    if config.get("room") is not None:
        config["room"] = str(config["room"])

    # Credentials never live in the config file.
    config["hipchat_token"] = os.environ.get("HIPCHAT_TOKEN")

    return config


def validate_config(config: dict) -> None:
    """Check the keys the selected backend needs, raising ConfigError on the first problem."""
    backend = config.get("backend")
    if backend not in BACKENDS:
        raise ConfigError(f"Unknown backend: {backend!r}. Choose one of {', '.join(BACKENDS)}.")
    if backend == "hipchat" and not config.get("hipchat_token"):
        raise ConfigError("HIPCHAT_TOKEN environment variable is not set.")
    timeout = config.get("timeout")
    if not isinstance(timeout, (int, float)) or isinstance(timeout, bool) or timeout <= 0:
        raise ConfigError(f"timeout must be a positive number, got {timeout!r}")
