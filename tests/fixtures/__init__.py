"""Test fixtures for codeprint.

Sample Repositories:
- sample_repos/js_project: A small Express service with a Jest test
"""

from pathlib import Path

# Path to fixtures directory
FIXTURES_DIR = Path(__file__).parent

# Path to sample repositories
SAMPLE_REPOS_DIR = FIXTURES_DIR / "sample_repos"

# Specific sample repository paths
JS_PROJECT_PATH = SAMPLE_REPOS_DIR / "js_project"

# Files of JS_PROJECT_PATH in listing order
JS_PROJECT_FILES = [
    "src/userService.js",
    "src/utils/format.js",
    "test/userService.test.js",
]
