"""Utility functions for file I/O and boundary parsing."""

import json
import logging
import math
import re
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from .constants import SCORE_EPSILON, WEEK_KEY_PREFIX

T = TypeVar('T', bound=BaseModel)
logger = logging.getLogger('leaguehistory.utils')

_LEADING_INT = re.compile(r'^[+-]?\d+')
_WEEK_KEY = re.compile(rf'^{WEEK_KEY_PREFIX}(\d+)$')


def load_json(
    path: Path | str,
    schema: type[T] | None = None,
) -> Any | T:
    """
    Load JSON file with optional schema validation.

    Args:
        path: Path to JSON file (str or Path object)
        schema: Optional Pydantic model (plain or root model) to validate against

    Returns:
        Parsed JSON (validated if schema provided)

    Raises:
        FileNotFoundError: If file doesn't exist
        json.JSONDecodeError: If JSON is malformed
        ValueError: If schema validation fails

    Example:
        from leaguehistory.schemas import OwnersFile
        owners = load_json('data/owners-data.json', schema=OwnersFile).root
    """
    path = Path(path)

    logger.debug(f'Loading JSON from: {path}')

    if not path.exists():
        logger.error(f'File not found: {path}')
        raise FileNotFoundError(f'File not found: {path}')

    try:
        with open(path, encoding='utf-8') as f:
            data = json.load(f)
        logger.debug(f'Successfully loaded JSON from: {path}')
    except json.JSONDecodeError as e:
        logger.error(f'Invalid JSON in {path}: {e.msg} at position {e.pos}')
        raise json.JSONDecodeError(f'Invalid JSON in {path}: {e.msg}', e.doc, e.pos) from e

    if schema:
        try:
            validated = schema.model_validate(data)
            logger.debug(f'Schema validation passed for: {path}')
            return validated
        except ValidationError as e:
            logger.error(f'Schema validation failed for {path}: {e}')
            raise ValueError(f'Schema validation failed for {path}:\n{e}') from e

    return data


def save_json(
    path: Path | str,
    data: Any,
    indent: int = 2,
    create_dirs: bool = True,
) -> None:
    """
    Save data as JSON file.

    Args:
        path: Path to write to (str or Path object)
        data: Data to serialize (must be JSON-serializable or Pydantic model)
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

    json_data = data.model_dump(by_alias=True) if isinstance(data, BaseModel) else data

    try:
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(json_data, f, indent=indent, ensure_ascii=False)
        logger.debug(f'Successfully saved JSON to: {path}')
    except TypeError as e:
        logger.error(f'Data is not JSON-serializable: {e}')
        raise TypeError(f'Data is not JSON-serializable: {e}') from e
    except OSError as e:
        logger.error(f'Failed to write file {path}: {e}')
        raise


def load_json_safe(
    path: Path | str,
    default: Any = None,
    schema: type[T] | None = None,
) -> Any | T:
    """
    Load JSON file, returning default if the file is missing.

    Malformed JSON and schema violations still raise; only absence is
    treated as "no data".

    Args:
        path: Path to JSON file
        default: Value to return if file missing (default: None)
        schema: Optional Pydantic model to validate against

    Returns:
        Parsed JSON, validated data, or default value
    """
    if not Path(path).exists():
        logger.info(f'Optional data file not present: {path}')
        return default
    return load_json(path, schema=schema)


def validate_json_file(
    path: Path | str,
    schema: type[T],
) -> tuple[bool, str | None]:
    """
    Validate a JSON file against a schema.

    Returns:
        Tuple of (is_valid, error_message)
    """
    try:
        load_json(path, schema=schema)
        return True, None
    except FileNotFoundError:
        return False, f'File not found: {path}'
    except json.JSONDecodeError as e:
        return False, f'Invalid JSON: {e.msg} at position {e.pos}'
    except ValueError as e:
        return False, str(e)


def normalize_team_name(value: Any) -> str:
    """
    Normalize a team display name for use as a map key.

    Args:
        value: Team name (None is treated as blank)

    Returns:
        Trimmed, lowercased name; '' when blank

    Example:
        normalize_team_name('  Hedd Hunters ')  # 'hedd hunters'
    """
    if value is None:
        return ''
    return str(value).strip().lower()


def parse_score(value: Any) -> float | None:
    """
    Parse a score from the payload.

    Scores arrive as decimal strings ('104.40') or numbers. Blank,
    non-numeric, NaN and infinite values are unparsable.

    Returns:
        The score as a float, or None when unparsable
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        score = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(score):
        return None
    return score


def parse_rank(value: Any) -> int | None:
    """
    Parse a rank field ('1', ' 3 ', '2nd', '').

    Reads the leading integer; blank or non-numeric ranks give None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    match = _LEADING_INT.match(str(value).strip())
    if not match:
        return None
    return int(match.group(0))


def week_key(week: int) -> str:
    """Build the weekly payload key for a week number."""
    return f'{WEEK_KEY_PREFIX}{week}'


def week_number(key: str) -> int | None:
    """Extract the week number from a 'week<N>' key, or None."""
    match = _WEEK_KEY.match(str(key).strip())
    if not match:
        return None
    return int(match.group(1))


def compare_scores(score: float, other: float, epsilon: float = SCORE_EPSILON) -> int:
    """
    Compare two scores with tolerance.

    Returns:
        1 if score wins, -1 if it loses, 0 for a tie (difference within epsilon)
    """
    diff = score - other
    if diff > epsilon:
        return 1
    if diff < -epsilon:
        return -1
    return 0


def scores_equal(score: float, other: float, epsilon: float = SCORE_EPSILON) -> bool:
    """Check whether two scores are equal within tolerance."""
    return abs(score - other) < epsilon


def sorted_season_ids(season_ids, descending: bool = False) -> list[str]:
    """Sort season ids (year strings) numerically; non-numeric ids sort last."""
    def sort_key(season_id: str):
        rank = parse_rank(season_id)
        return (rank is None, rank if rank is not None else 0, season_id)

    ordered = sorted({str(s) for s in season_ids}, key=sort_key)
    if descending:
        numeric = [s for s in ordered if parse_rank(s) is not None]
        other = [s for s in ordered if parse_rank(s) is None]
        return list(reversed(numeric)) + other
    return ordered


def win_pct(wins: int, losses: int, ties: int) -> float:
    """Win percentage (0-100) counting ties as half a win."""
    games = wins + losses + ties
    if games <= 0:
        return 0.0
    return (wins + 0.5 * ties) / games * 100


def format_record(wins: int, losses: int, ties: int = 0) -> str:
    """Format a record as 'W-L' or 'W-L-T' when ties exist."""
    if ties:
        return f'{wins}-{losses}-{ties}'
    return f'{wins}-{losses}'
