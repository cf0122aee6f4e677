"""codeprint - code style fingerprinting.

codeprint reads a batch of source files, fingerprints each one with
line-oriented and regex heuristics (naming, formatting, structure,
dependencies), folds the fingerprints into a repository-level style profile
with a confidence estimate, and can ask an LLM to generate new code that
follows the profile.
"""

__version__ = "0.1.0"
__author__ = "codeprint contributors"
