"""Entry point for running codeprint as a module.

Usage:
    python -m codeprint [command] [options]

Example:
    python -m codeprint analyze ./my-project --format markdown
    python -m codeprint fingerprint src/app.js
"""

from codeprint.cli import app

if __name__ == "__main__":
    app()
