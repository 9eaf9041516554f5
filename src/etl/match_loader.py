"""matches / standings JSON 로드 + standings 출력."""

import json
import logging
import math
import os
import stat
import tempfile
from pathlib import Path
from typing import Any

import pandas as pd

from src.engine.errors import MatchParseError
from src.engine.rating_config import SeriesKind

logger = logging.getLogger(__name__)

MATCH_COLUMNS = ['match_index', 'winner', 'loser', 'series']


def _read_json(path: Path | str) -> Any:
    path = Path(path)
    with open(path, encoding='utf-8') as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise MatchParseError(
                f"{path}: malformed JSON at line {e.lineno} column {e.colno}: {e.msg}"
            ) from e
        except UnicodeDecodeError as e:
            raise MatchParseError(f"{path}: not valid UTF-8: {e}") from e


def _team_name(record: dict, field: str, idx: int, path: Path) -> str:
    if field not in record:
        raise MatchParseError(f"{path}: matches[{idx}]: missing field '{field}'")
    name = record[field]
    if not isinstance(name, str) or not name:
        raise MatchParseError(f"{path}: matches[{idx}].{field}: expected a team name, got {name!r}")
    return name


def parse_matches(data: Any, path: Path | str = '<matches>') -> pd.DataFrame:
    """match 배열 → DataFrame (배열 순서 유지)."""
    path = Path(path)
    if not isinstance(data, list):
        raise MatchParseError(f"{path}: expected an array of matches, got {type(data).__name__}")

    rows = []
    for idx, record in enumerate(data):
        if not isinstance(record, dict):
            raise MatchParseError(f"{path}: matches[{idx}]: expected an object, got {record!r}")
        winner = _team_name(record, 'winner', idx, path)
        loser = _team_name(record, 'loser', idx, path)
        if 'series' not in record:
            raise MatchParseError(f"{path}: matches[{idx}]: missing field 'series'")
        try:
            series = SeriesKind.parse(record['series'])
        except ValueError as e:
            raise MatchParseError(f"{path}: matches[{idx}].series: {e}") from None
        if winner == loser:
            raise MatchParseError(
                f"{path}: matches[{idx}]: winner and loser are the same team '{winner}'"
            )
        rows.append({'match_index': idx, 'winner': winner, 'loser': loser, 'series': series})

    return pd.DataFrame(rows, columns=MATCH_COLUMNS)


def load_matches(path: Path | str) -> pd.DataFrame:
    """matches JSON 파일 로드."""
    match_df = parse_matches(_read_json(path), path)
    logger.info(f"  Loaded {len(match_df):,} matches from {path}")
    return match_df


def parse_standings(data: Any, path: Path | str = '<standings>') -> dict[str, float]:
    """{team: rating} 객체 검증."""
    if not isinstance(data, dict):
        raise MatchParseError(f"{path}: expected an object of team → rating, got {type(data).__name__}")

    standings = {}
    for team, rating in data.items():
        if isinstance(rating, bool) or not isinstance(rating, (int, float)):
            raise MatchParseError(f"{path}: standings['{team}']: expected a number, got {rating!r}")
        try:
            rating = float(rating)
        except OverflowError:
            raise MatchParseError(
                f"{path}: standings['{team}']: rating must be finite, got an integer too large for a float"
            ) from None
        # json 모듈은 NaN / Infinity 리터럴 허용
        if not math.isfinite(rating):
            raise MatchParseError(f"{path}: standings['{team}']: rating must be finite, got {rating!r}")
        standings[team] = rating
    return standings


def load_standings(path: Path | str) -> dict[str, float]:
    """standings JSON 파일 로드."""
    standings = parse_standings(_read_json(path), path)
    logger.info(f"  Loaded {len(standings):,} teams from {path}")
    return standings


def _output_mode(path: Path) -> int:
    """기존 파일 권한 유지, 신규 파일은 0o666 & ~umask (mkstemp 기본 0o600 대체)."""
    if path.exists():
        return stat.S_IMODE(path.stat().st_mode)
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def write_standings(path: Path | str, standings: dict[str, float]) -> None:
    """standings JSON 저장 (임시 파일 → os.replace, 실패 시 기존 파일 유지)."""
    path = Path(path)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix='.tmp', dir=path.parent)
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            json.dump(standings, f, indent=2, ensure_ascii=False, allow_nan=False)
            f.write('\n')
        os.chmod(tmp_name, _output_mode(path))
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.remove(tmp_name)
        raise
    logger.info(f"  Wrote {len(standings):,} teams to {path}")
