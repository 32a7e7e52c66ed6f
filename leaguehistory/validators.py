"""Data-quality checks over league payloads."""

from pathlib import Path
from typing import Optional

from .data_store import DEFAULT_FILE_NAMES, SOURCE_SCHEMAS, LeagueDataStore
from .models import TeamOwnerIndex
from .reconciliation import SeasonReconciliation, matchup_key
from .utils import format_record, normalize_team_name, parse_score, validate_json_file, week_number


def validate_data_files(data_dir: Path | str, files: Optional[dict[str, str]] = None) -> list[str]:
    """
    Validate each source file in data_dir against its schema.

    Checks:
    - File is well-formed JSON
    - Payload matches the source schema

    Missing files are not errors; the store treats them as empty sources.

    Returns:
        List of validation error messages (empty if valid)
    """
    names = {**DEFAULT_FILE_NAMES, **(files or {})}
    errors = []
    for source, schema in SOURCE_SCHEMAS.items():
        path = Path(data_dir) / names[source]
        if not path.exists():
            continue
        is_valid, error = validate_json_file(path, schema)
        if not is_valid:
            errors.append(f'{path.name}: {error}')
    return errors


def validate_season_metadata(store: LeagueDataStore) -> list[str]:
    """
    Validate season metadata against the weekly data.

    Checks:
    - Regular season ends no later than the season
    - Every season with weekly data has metadata
    - Week keys are well-formed and within the season

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []

    for season_id in store.all_season_ids():
        meta = store.get_season_meta(season_id)
        season = store.get_season_weeks(season_id)

        if meta is None:
            if season is not None:
                errors.append(f'{season_id} has weekly matchups but no season metadata')
            continue

        if meta.regular_season_end_week > meta.season_end_week:
            errors.append(
                f'{season_id} regular season ends week {meta.regular_season_end_week} '
                f'after season end week {meta.season_end_week}'
            )

        for key in season or {}:
            number = week_number(key)
            if number is None:
                errors.append(f'{season_id} has malformed week key "{key}"')
            elif number > meta.season_end_week:
                errors.append(f'{season_id} has data for {key} after season end week {meta.season_end_week}')

    return errors


def validate_weekly_entry_pairs(store: LeagueDataStore, season_id) -> list[str]:
    """
    Check that both entries of each game agree.

    Checks:
    - Both sides report the same scores for the same teams
    - No team is scheduled against itself

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []
    season = store.get_season_weeks(season_id) or {}

    for key in store.get_week_keys(season_id):
        games: dict[str, list] = {}
        for team_key, entry in season[key].items():
            matchup = entry.matchup
            if matchup is None:
                errors.append(f'{season_id} {key} {team_key} has no matchup')
                continue

            name1 = normalize_team_name(matchup.team1_name)
            name2 = normalize_team_name(matchup.team2_name)
            if name1 and name1 == name2:
                errors.append(f'{season_id} {key} {team_key} is scheduled against itself')

            game_key = matchup_key(matchup)
            if game_key is None:
                errors.append(f'{season_id} {key} {team_key} has an unidentifiable opponent')
                continue

            scores = {
                name1: parse_score(matchup.team1_score),
                name2: parse_score(matchup.team2_score),
            }
            games.setdefault(game_key, []).append((team_key, scores))

        for game_key, sides in games.items():
            if len(sides) < 2:
                continue
            (first_key, first_scores), (second_key, second_scores) = sides[0], sides[1]
            if first_scores != second_scores:
                errors.append(
                    f'{season_id} {key} game {game_key}: {first_key} and {second_key} '
                    f'report different scores'
                )

    return errors


def validate_standings_vs_weekly(reconciliation: SeasonReconciliation) -> list[str]:
    """
    Compare weekly-derived records with the standings for one season.

    Returns:
        List of warning messages (empty if the sources agree)
    """
    warnings = []
    for owner_id, derived, standings in reconciliation.record_mismatches():
        warnings.append(
            f'{reconciliation.season_id} {owner_id}: weekly '
            f'{format_record(derived.wins, derived.losses, derived.ties)} vs standings '
            f'{format_record(standings.wins, standings.losses, standings.ties)}'
        )
    return warnings


def validate_team_names(index: TeamOwnerIndex) -> list[str]:
    """
    List team names that can't be resolved because more than one owner used them.

    Returns:
        List of warning messages (empty if every name is unique to one owner)
    """
    return [
        f'Team name "{name}" is used by more than one owner and will not resolve'
        for name in sorted(index.ambiguous_teams)
    ]
