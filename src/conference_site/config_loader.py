"""TOML loader for speaker poll seed data.

Loads and validates a speakers TOML file so the poll can be seeded
programmatically::

    [[speakers]]
    name = "Bradley Bennett"

    [[speakers]]
    name = "Brooke Kinchen"

A plain list (``speakers = ["Bradley Bennett", "Brooke Kinchen"]``) is
accepted as well.
"""

import tomllib
from pathlib import Path
from typing import Any

_MAX_SPEAKER_NAME_LENGTH = 200


def _speaker_name(item: object, idx: int) -> str:
    """Extract and validate a single speaker name.

    Args:
        item: A string or a mapping with a ``name`` key.
        idx: Position of the item, for error messages.

    Returns:
        The stripped speaker name.
    """
    label = f"speakers[{idx}]"
    if isinstance(item, dict):
        if "name" not in item:
            msg = f"{label} is missing required field: name"
            raise ValueError(msg)
        item = item["name"]
    if not isinstance(item, str) or not item.strip():
        msg = f"{label} must be a non-empty string"
        raise ValueError(msg)
    name = item.strip()
    if len(name) > _MAX_SPEAKER_NAME_LENGTH:
        msg = f"{label} is longer than {_MAX_SPEAKER_NAME_LENGTH} characters"
        raise ValueError(msg)
    return name


def load_speakers(path: str | Path) -> list[str]:
    """Load and validate a speakers TOML file.

    Args:
        path: Filesystem path to the TOML file.

    Returns:
        Speaker names in file order.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If the ``speakers`` key is missing or empty, an entry is
            invalid, a name is duplicated, or the file is not valid TOML.
    """
    path = Path(path)
    if not path.exists():
        msg = f"Speakers file not found: {path}"
        raise FileNotFoundError(msg)

    with path.open("rb") as fh:
        try:
            data: dict[str, Any] = tomllib.load(fh)
        except tomllib.TOMLDecodeError as exc:
            msg = f"Invalid TOML in {path}: {exc}"
            raise ValueError(msg) from exc

    items = data.get("speakers")
    if not isinstance(items, list) or not items:
        msg = "speakers must be a non-empty list"
        raise ValueError(msg)

    names = [_speaker_name(item, idx) for idx, item in enumerate(items)]

    seen: set[str] = set()
    duplicates: set[str] = set()
    for name in names:
        if name in seen:
            duplicates.add(name)
        seen.add(name)
    if duplicates:
        msg = f"speakers has duplicate names: {', '.join(sorted(duplicates))}"
        raise ValueError(msg)

    return names
