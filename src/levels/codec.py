"""
Level decoding and encoding.

Payloads are decoded into the `Level` tagged union here, before anything
reaches the engine. Anything that cannot be decoded raises `LevelDecodeError`.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import TypeAdapter, ValidationError

from .models import Level

_LEVEL_ADAPTER: TypeAdapter = TypeAdapter(Level)

YAML_SUFFIXES = {".yaml", ".yml"}


class LevelDecodeError(ValueError):
    """A level payload could not be parsed or does not match any level kind."""


def infer_kind(data: Dict[str, Any]) -> str:
    """
    Determine the level kind of a payload that does not declare one.

    Editor exports carry `type` on each pipe; declarative layouts carry
    `connections`.
    """
    pipes = data.get("pipes")
    if not isinstance(pipes, list):
        return "pipe_custom"
    if any(isinstance(pipe, dict) and "connections" in pipe for pipe in pipes):
        return "pipe_layout"
    return "pipe_custom"


def decode_level_data(data: Any) -> Level:
    """Validate already-parsed data (a dict) into a level."""
    if not isinstance(data, dict):
        raise LevelDecodeError(f"Level payload must be an object, got {type(data).__name__}")

    if "kind" not in data:
        data = {**data, "kind": infer_kind(data)}

    try:
        return _LEVEL_ADAPTER.validate_python(data)
    except ValidationError as e:
        raise LevelDecodeError(f"Invalid level '{data.get('id', '?')}': {e}") from e


def decode_level(payload: Union[str, bytes]) -> Level:
    """Decode a JSON level payload."""
    try:
        data = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise LevelDecodeError(f"Level payload is not valid JSON: {e}") from e

    return decode_level_data(data)


def encode_level(level: Level, indent: Optional[int] = None) -> str:
    """Encode a level as JSON using the camelCase transport field names."""
    return level.model_dump_json(by_alias=True, indent=indent)


def load_level_file(path: Union[str, Path]) -> Level:
    """
    Load a level from a JSON or YAML file.

    Raises:
        FileNotFoundError: If the file does not exist
        LevelDecodeError: If the contents are not a valid level
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Level file not found: {path}")

    text = path.read_text(encoding="utf-8")

    if path.suffix.lower() in YAML_SUFFIXES:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise LevelDecodeError(f"Level file {path} is not valid YAML: {e}") from e
        return decode_level_data(data)

    return decode_level(text)


def save_level_file(level: Level, path: Union[str, Path]) -> Path:
    """Write a level as JSON, creating parent directories as needed."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(encode_level(level, indent=2), encoding="utf-8")
    return path
