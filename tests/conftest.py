"""
Shared fixtures for php-git-hooks tests.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest


def make_executable(path: Path, body: str = "exit 0") -> Path:
    """Write a small shell script and mark it executable."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"#!/bin/sh\n{body}\n")
    path.chmod(0o755)
    return path


@pytest.fixture
def project(tmp_path):
    """A project directory with an empty vendor/bin."""
    (tmp_path / "vendor" / "bin").mkdir(parents=True)
    return tmp_path


@pytest.fixture
def style_payload():
    """phpcs JSON report with one fixable error."""
    return json.dumps(
        {
            "totals": {"errors": 1, "warnings": 0, "fixable": 1},
            "files": {
                "a.php": {
                    "errors": 1,
                    "warnings": 0,
                    "messages": [
                        {
                            "type": "ERROR",
                            "line": 3,
                            "column": 1,
                            "message": "x",
                            "fixable": True,
                        }
                    ],
                }
            },
        }
    )


@pytest.fixture
def analysis_payload():
    """PHPStan JSON report with two errors in one file."""
    return json.dumps(
        {
            "totals": {"errors": 0, "file_errors": 2},
            "files": {
                "src/Service.php": {
                    "errors": 2,
                    "messages": [
                        {
                            "message": "Method Service::run() has no return type specified.",
                            "line": 12,
                            "ignorable": True,
                        },
                        {
                            "message": "Undefined variable: $user",
                            "line": 27,
                            "ignorable": True,
                        },
                    ],
                }
            },
            "errors": [],
        }
    )


@pytest.fixture
def executable():
    """Factory writing executable shell scripts."""
    return make_executable
