from __future__ import annotations

import asyncio
import json
from pathlib import Path

from vidshelf.app import VidshelfApp
from vidshelf.config import AppConfig, load_config
from vidshelf.store import JsonLibraryStore


def _write_library(path: Path) -> None:
    payload = {
        "version": 1,
        "tags": ["cat", "dog"],
        "videos": [
            {"id": "a", "path": "/v/a.mp4", "tags": ["cat"]},
            {"id": "b", "path": "/v/b.mp4", "tags": ["dog"]},
        ],
    }
    path.write_text(json.dumps(payload), encoding="utf-8")


def test_deleted_filter_tag_is_removed_from_saved_config(tmp_path: Path) -> None:
    library = tmp_path / "library.json"
    config_file = tmp_path / "config.json"
    _write_library(library)
    config = AppConfig(required_tags=["cat"])

    async def scenario() -> None:
        app = VidshelfApp(JsonLibraryStore(library), config, config_file=config_file)
        await app.controller.load()
        await app._run_mutation(app.controller.delete_tag("cat"), None)

    asyncio.run(scenario())
    saved, error = load_config(config_file)
    assert error is None
    assert saved.required_tags == []


def test_renamed_filter_tag_is_saved(tmp_path: Path) -> None:
    library = tmp_path / "library.json"
    config_file = tmp_path / "config.json"
    _write_library(library)
    config = AppConfig(required_tags=["cat"])

    async def scenario() -> None:
        app = VidshelfApp(JsonLibraryStore(library), config, config_file=config_file)
        await app.controller.load()
        await app._run_mutation(app.controller.rename_tag("cat", "kitten"), None)

    asyncio.run(scenario())
    saved, _ = load_config(config_file)
    assert saved.required_tags == ["kitten"]


def test_reload_saves_filter_without_missing_tags(tmp_path: Path) -> None:
    library = tmp_path / "library.json"
    config_file = tmp_path / "config.json"
    _write_library(library)
    config = AppConfig(required_tags=["gone", "dog"])

    async def scenario() -> None:
        app = VidshelfApp(JsonLibraryStore(library), config, config_file=config_file)
        await app._load_library()

    asyncio.run(scenario())
    saved, _ = load_config(config_file)
    assert saved.required_tags == ["dog"]
