"""Shared pytest fixtures for codeprint tests.

Fixtures are organized by category:
- Path fixtures: Sample projects on disk
- Logging fixtures: Isolation of the ``codeprint`` logger between tests
- Source fixtures: Representative source texts
- Configuration fixtures: Config dictionaries for various scenarios
"""

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest

from tests.fixtures import JS_PROJECT_PATH

# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture
def js_project() -> Path:
    """Return the path to the sample JavaScript project."""
    return JS_PROJECT_PATH


@pytest.fixture
def temp_project(tmp_path: Path) -> Path:
    """Create a small project with files that must and must not be listed."""
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "main.js").write_text("const appName = 'demo';\n")
    (tmp_path / "src" / "helpers.py").write_text("import os\n\n\ndef helper():\n    return os.sep\n")
    (tmp_path / "notes.txt").write_text("not code\n")
    (tmp_path / "node_modules" / "dep").mkdir(parents=True)
    (tmp_path / "node_modules" / "dep" / "index.js").write_text("module.exports = 1;\n")
    (tmp_path / ".git").mkdir()
    (tmp_path / ".git" / "hook.js").write_text("exit();\n")
    return tmp_path


# =============================================================================
# Logging Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_codeprint_logger() -> Iterator[None]:
    """Undo handlers and levels installed by CLI invocations."""
    yield
    logger = logging.getLogger("codeprint")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


# =============================================================================
# Source Code Fixtures
# =============================================================================


@pytest.fixture
def javascript_source() -> str:
    """Return a JavaScript module exercising every extractor section."""
    return '''import React from 'react';
import axios from 'axios';
import { helper } from './helper';

/**
 * Renders a user card.
 */
class UserCard extends React.Component {
  constructor(props) {
    super(props);
    this.state = { loaded: false };
  }

  render() {
    if (this.state.loaded) {
      return null;
    }
    return helper(this.props);
  }
}

// Fetches a user, raising on failure.
async function fetchUser(userId) {
  try {
    const response = await axios.get(`/users/${userId}`);
    return response.data;
  } catch (error) {
    throw new Error('fetch failed');
  }
}

const formatUser = (user) => {
  const displayName = user.name;
  return displayName;
};

export default UserCard;
'''


@pytest.fixture
def python_source() -> str:
    """Return a Python module using snake_case and try/except/raise."""
    return '''import os
import json
from pathlib import Path
from .models import Record


def load_records(path):
    try:
        with open(path) as handle:
            return json.load(handle)
    except OSError as exc:
        raise RuntimeError(path) from exc
'''


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def minimal_config() -> dict[str, Any]:
    """Return a minimal valid codeprint configuration."""
    return {
        "output": {
            "format": "markdown",
        }
    }


@pytest.fixture
def full_config() -> dict[str, Any]:
    """Return a complete codeprint configuration with all sections."""
    return {
        "source": {
            "extensions": [".js", "TS"],
            "exclude_dirs": ["vendor"],
            "max_file_bytes": 5000,
        },
        "github": {
            "api_base": "https://github.example.com/api/v3",
            "max_repos": 3,
            "files_per_repo": 5,
            "timeout": 10,
        },
        "analysis": {
            "max_files": 50,
            "workers": 2,
            "numeric_merge": "cumulative",
            "max_matches": 200,
        },
        "llm": {
            "provider": "ollama",
            "model": "llama3.2",
            "temperature": 0.5,
            "max_tokens": 1024,
        },
        "output": {
            "path": "style.md",
            "format": "markdown",
        },
    }
