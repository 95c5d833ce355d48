"""Shared fixtures: a small asset library on disk."""

import json
import tempfile
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest

from prego_assets.core.interfaces import PromptResult


def write_json(path: Path, document: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(document, indent=2), encoding="utf-8")
    return path


def write_binary(path: Path, content: bytes = b"\x00binary") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path


class ScriptedPrompt:
    """Prompt double answering from a list and recording every question."""

    def __init__(self, *answers: PromptResult):
        self.answers = list(answers)
        self.questions: list[tuple[str, str, bool]] = []

    def confirm(self, title: str, message: str, allow_cancel: bool = False) -> PromptResult:
        self.questions.append((title, message, allow_cancel))
        if not self.answers:
            raise AssertionError(f"Unexpected prompt: {title}: {message}")
        return self.answers.pop(0)


@pytest.fixture
def workspace() -> Iterator[Path]:
    """A temporary directory for a test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def empty_root(workspace: Path) -> Path:
    """An empty ``pw-assets`` directory."""
    root = workspace / "pw-assets"
    root.mkdir()
    return root


@pytest.fixture
def library_root(empty_root: Path) -> Path:
    """A ``pw-assets`` directory with two materials, a prop and a map.

    - lukec.material.rock: flat color
    - lukec.material.brick: textured (materials/brick/textures/brick.png)
    - lukec.prop.chair: model props/chair/chair.obj, uses rock
    - lukec.map.arena: uses brick (block) and chair (prop block)
    """
    root = empty_root

    write_json(root / "materials" / "rock.json", {
        "identifier": "lukec.material.rock",
        "material": {"name": "Rock", "color": 0.5, "roughness": 0.9},
    })

    write_json(root / "materials" / "brick" / "brick.json", {
        "identifier": "lukec.material.brick",
        "material": {"name": "Brick", "texture": "textures/brick.png"},
    })
    write_binary(root / "materials" / "brick" / "textures" / "brick.png")

    write_json(root / "props" / "chair" / "chair.json", {
        "identifier": "lukec.prop.chair",
        "prop": {
            "name": "Chair",
            "model": "chair.obj",
            "base_scale": 2,
            "materials": ["lukec.material.rock"],
        },
    })
    write_binary(root / "props" / "chair" / "chair.obj")

    write_json(root / "maps" / "arena.json", {
        "identifier": "lukec.map.arena",
        "map": {"name": "Arena", "description": "A small arena", "death_plane": -50},
        "blocks": [
            {
                "type": "block",
                "transform": {"position": [0, 1, 2], "rotation": 0, "scale": 4},
                "shape": "cube",
                "material": "lukec.material.brick",
            },
            {
                "type": "prop",
                "transform": {"position": [5, 0, 5]},
                "prop": "lukec.prop.chair",
            },
            {"type": "entity", "transform": {}, "entity": "spawn"},
            {
                "type": "text",
                "transform": {"position": [0, 10, 0]},
                "text": {"content": "Welcome", "wrap": None, "color": [1, 0, 0]},
            },
        ],
    })

    return root
