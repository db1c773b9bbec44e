"""Shared fixtures for integration tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

# ── Marker registration ──────────────────────────────────────────


def pytest_configure(config: pytest.Config) -> None:
    """Register the ``integration`` marker."""
    config.addinivalue_line("markers", "integration: integration tests")


# ── File creation helpers ────────────────────────────────────────


def write_file(root: Path, rel: str, content: str) -> None:
    """Write *content* to a file under *root*."""
    f = root / rel
    f.parent.mkdir(parents=True, exist_ok=True)
    f.write_text(content, encoding="utf-8")


def write_json(root: Path, rel: str, data: dict[str, Any]) -> None:
    """Write a JSON file under *root*."""
    write_file(root, rel, json.dumps(data, indent=2))


def read_json(root: Path, rel: str) -> Any:
    """Read and decode a JSON file under *root*."""
    return json.loads((root / rel).read_text(encoding="utf-8"))


# ── Project scaffolding fixtures ─────────────────────────────────


@pytest.fixture()
def checkout(tmp_path: Path) -> Path:
    """Create a repository checkout with CODEOWNERS and two result sets.

    Paths in the result sets are absolute, as SimpleCov writes them, so
    diffs must strip the checkout directory.
    """
    root = tmp_path / "repo"
    write_file(
        root,
        ".github/CODEOWNERS",
        "# Ownership\n"
        "*                 @acme/platform\n"
        "/app/models/      @acme/data\n"
        "/app/views/*.rb   @acme/web @acme/design\n",
    )
    write_file(root, ".covdelta.yml", "diff:\n  base_dir: ${CHECKOUT_DIR}\n")

    write_json(
        root,
        "baseline/.resultset.json",
        {
            "RSpec": {
                "coverage": {
                    f"{root}/app/models/user.rb": {"lines": [1, 1, 0, None]},
                    f"{root}/app/models/legacy.rb": {"lines": [1, 0]},
                    f"{root}/app/views/home.rb": {
                        "lines": [1, 0],
                        "branches": {"[:if, 0, 1, 2]": {"[:then, 1]": 1, "[:else, 2]": 0}},
                    },
                },
                "timestamp": 1700000000,
            },
        },
    )
    write_json(
        root,
        "current/.resultset.json",
        {
            "RSpec": {
                "coverage": {
                    f"{root}/app/models/user.rb": {"lines": [1, 0, 0, None]},
                    f"{root}/app/views/home.rb": {
                        "lines": [1, 0],
                        "branches": {"[:if, 0, 1, 2]": {"[:then, 1]": 0, "[:else, 2]": 0}},
                    },
                    f"{root}/lib/tasks.rb": [None, 1],
                },
                "timestamp": 1700003600,
            },
            "Cucumber": {
                "coverage": {
                    f"{root}/app/models/user.rb": {"lines": [0, 3, 0, None]},
                    f"{root}/app/views/home.rb": {
                        "lines": [0, 1],
                        "branches": {"[:if, 0, 1, 2]": {"[:then, 1]": 2}},
                    },
                },
                "timestamp": 1700003500,
            },
        },
    )
    return root
