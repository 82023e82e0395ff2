from __future__ import annotations

from pathlib import Path

from platformdirs import user_config_path, user_data_path, user_log_path

APP_NAME = "vidshelf"


def config_root() -> Path:
    root = user_config_path(APP_NAME)
    root.mkdir(parents=True, exist_ok=True)
    return root


def config_path() -> Path:
    return config_root() / "config.json"


def data_root() -> Path:
    root = user_data_path(APP_NAME)
    root.mkdir(parents=True, exist_ok=True)
    return root


def library_path() -> Path:
    return data_root() / "library.json"


def default_log_path() -> Path:
    root = user_log_path(APP_NAME)
    root.mkdir(parents=True, exist_ok=True)
    return root / "vidshelf.log"
