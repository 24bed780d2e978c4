"""Utility functions for league file I/O and timestamps."""

import json
import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from .constants import DAY_ZERO, LEGACY_TIME_FORMATS, TIME_FORMAT

T = TypeVar('T', bound=BaseModel)
logger = logging.getLogger('torn.utils')


def load_json(
    path: Path | str,
    schema: type[T] | None = None,
) -> Any | T:
    """
    Load a JSON file with optional schema validation.

    Args:
        path: Path to JSON file (str or Path object)
        schema: Optional Pydantic model to validate against

    Returns:
        Parsed JSON (validated if schema provided)

    Raises:
        FileNotFoundError: If file doesn't exist
        json.JSONDecodeError: If JSON is malformed
        ValueError: If schema validation fails

    Example:
        from torn.schemas import LeagueFile
        document = load_json('leagues/tuesday.json', schema=LeagueFile)
    """
    path = Path(path)

    logger.debug(f'Loading JSON from: {path}')

    if not path.exists():
        logger.error(f'File not found: {path}')
        raise FileNotFoundError(f'File not found: {path}')

    try:
        with open(path, encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f'Invalid JSON in {path}: {e.msg} at position {e.pos}')
        raise json.JSONDecodeError(f'Invalid JSON in {path}: {e.msg}', e.doc, e.pos) from e

    if schema is None:
        return data

    if not isinstance(data, dict):
        logger.error(f'Expected a JSON object in {path}, got {type(data).__name__}')
        raise ValueError(f'Expected a JSON object in {path}, got {type(data).__name__}')

    try:
        validated = schema(**data)
    except ValidationError as e:
        logger.error(f'Schema validation failed for {path}: {e}')
        raise ValueError(f'Schema validation failed for {path}:\n{e}') from e

    logger.debug(f'Schema validation passed for: {path}')
    return validated


def dump_json(data: Any, indent: int = 2) -> str:
    """Serialize data the way league files are written, with a trailing newline."""
    return json.dumps(data, indent=indent, ensure_ascii=False) + '\n'


def save_json(
    path: Path | str,
    data: Any,
    indent: int = 2,
    create_dirs: bool = True,
) -> None:
    """
    Save data as a JSON file.

    Args:
        path: Path to write to (str or Path object)
        data: JSON-serializable data or a Pydantic model
        indent: Indentation level (default: 2 spaces)
        create_dirs: Create parent directories if they don't exist (default: True)

    Raises:
        TypeError: If data is not JSON-serializable
        OSError: If file cannot be written
    """
    path = Path(path)

    logger.debug(f'Saving JSON to: {path}')

    if create_dirs:
        path.parent.mkdir(parents=True, exist_ok=True)

    if isinstance(data, BaseModel):
        data = data.model_dump()

    try:
        text = dump_json(data, indent=indent)
    except TypeError as e:
        logger.error(f'Data is not JSON-serializable: {e}')
        raise

    try:
        with open(path, 'w', encoding='utf-8', newline='\n') as f:
            f.write(text)
    except OSError as e:
        logger.error(f'Failed to write file {path}: {e}')
        raise

    logger.debug(f'Saved JSON to: {path}')


def parse_game_time(text: Optional[str], day_offset: Optional[float] = None) -> datetime:
    """
    Read a game timestamp from a league document.

    Tries ISO-8601 and then the legacy slash formats. When there is no usable
    text, the legacy day offset (days since 1899-12-30) is used instead.
    A UTC offset in ISO text is dropped; game times are naive wall clock
    times.

    Args:
        text: Timestamp text, e.g. '2024-03-05 19:30:00' or '2024/03/05 19:30:00'
        day_offset: Legacy numeric game time

    Returns:
        Parsed datetime; DAY_ZERO if neither form is usable
    """
    if text:
        text = text.strip()
        try:
            return datetime.fromisoformat(text).replace(tzinfo=None)
        except ValueError:
            pass
        for fmt in LEGACY_TIME_FORMATS:
            try:
                return datetime.strptime(text, fmt)
            except ValueError:
                continue
        try:
            return DAY_ZERO + timedelta(days=float(text))
        except (ValueError, OverflowError):
            logger.warning(f'Unrecognised game time {text!r}')

    if day_offset is not None:
        return DAY_ZERO + timedelta(days=day_offset)

    return DAY_ZERO


def format_game_time(time: datetime) -> str:
    """Document timestamp text; microseconds are written only when nonzero."""
    if time.microsecond:
        return time.strftime(TIME_FORMAT + '.%f')
    return time.strftime(TIME_FORMAT)


def title_from_path(path: Path | str) -> str:
    """League title from its file name: 'Tuesday_League.json' -> 'Tuesday League'."""
    return Path(path).stem.replace('_', ' ')
