"""Configuration constants for zettel-index."""

import os
from pathlib import Path

# Front matter property holding a note's identifier.
DEFAULT_ID_PROPERTY: str = os.environ.get("ZETTEL_ID_PROPERTY", "zettel_id")

# Log level when --verbose is not given.
LOG_LEVEL: str = os.environ.get("ZETTEL_LOG_LEVEL", "INFO").upper()

# Upper bound on root candidates tried when relocating a subtree. Hitting it
# means the target is implausibly crowded; it is reported, never truncated.
MAX_REMAP_ATTEMPTS: int = 500

# File name prefix for newly created notes ("zettel 1.a.md").
DEFAULT_NOTE_PREFIX: str = "zettel"

# Vault directory candidates. First directory which is found is used.
VAULT_DIRECTORIES: list[Path] = [
    Path("~/zettelkasten").expanduser(),
    Path("~/Documents/zettelkasten").expanduser(),
    Path("~/.local/share/zettel-index").expanduser(),
]


def resolve_vault_directory() -> Path:
    """Return the vault directory.

    ``ZETTEL_VAULT_DIR`` wins; otherwise the first existing candidate, falling
    back to the first candidate so callers can report it as missing.
    """
    env_dir = os.environ.get("ZETTEL_VAULT_DIR")
    if env_dir:
        return Path(env_dir).expanduser()
    for candidate in VAULT_DIRECTORIES:
        if candidate.is_dir():
            return candidate
    return VAULT_DIRECTORIES[0]
