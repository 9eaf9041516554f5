"""Rating Config Loader (K-bracket + Series weight).

설정 문서 형식:
    {
        "bo1_score": 1.0,
        "bo3_score": 1.2,
        "bo5_score": 1.5,
        "k_brackets": [{"start": 0, "k": 40}, {"start": 1600, "k": 24}],
        "initial_rating": 1500       (optional)
    }

.yaml / .yml 은 yaml.safe_load, 그 외 (config.json 등) 는 json.load.
"""
import json
import math
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Iterable

import numpy as np
import yaml

from src.engine.elo_config import INITIAL_ELO, default_config_path
from src.engine.errors import ComputationError, ConfigError

YAML_SUFFIXES = ('.yaml', '.yml')


class SeriesKind(str, Enum):
    """시리즈 형식 (Best-of-N)."""
    BO1 = 'Bo1'
    BO3 = 'Bo3'
    BO5 = 'Bo5'

    @classmethod
    def parse(cls, value) -> 'SeriesKind':
        if isinstance(value, cls):
            return value
        for kind in cls:
            if kind.value == value:
                return kind
        valid = ', '.join(k.value for k in cls)
        raise ValueError(f"unknown series kind {value!r} (expected one of: {valid})")


@dataclass(frozen=True)
class KBracket:
    """Rating 구간 시작점과 K-factor."""
    start: float
    k: float


class BracketTable:
    """K-factor bracket table.

    생성 시 start 오름차순으로 정렬하므로 입력 순서와 무관.
    rating 이 모든 start 보다 낮으면 가장 낮은 bracket 을 floor 로 사용.
    """

    def __init__(self, brackets: Iterable[KBracket]):
        ordered = tuple(sorted(brackets, key=lambda b: b.start))
        if not ordered:
            raise ConfigError("k_brackets must contain at least one bracket")
        starts = np.array([b.start for b in ordered], dtype=float)
        if np.any(np.diff(starts) == 0):
            dupes = sorted({float(s) for s in starts[1:][np.diff(starts) == 0]})
            raise ConfigError(f"k_brackets has duplicate start values: {dupes}")
        self._brackets = ordered
        self._starts = starts
        self._ks = np.array([b.k for b in ordered], dtype=float)

    @property
    def brackets(self) -> tuple[KBracket, ...]:
        return self._brackets

    def __len__(self) -> int:
        return len(self._brackets)

    def k_for(self, rating: float) -> float:
        """rating 에 적용할 K 반환 (start <= rating 인 가장 높은 bracket)."""
        if not math.isfinite(rating):
            raise ComputationError(f"cannot resolve K-factor for non-finite rating {rating!r}")
        idx = int(np.searchsorted(self._starts, rating, side='right')) - 1
        return float(self._ks[max(idx, 0)])

    def __repr__(self) -> str:
        inner = ', '.join(f"{b.start:g}:{b.k:g}" for b in self._brackets)
        return f"BracketTable([{inner}])"


@dataclass(frozen=True)
class SeriesWeights:
    """시리즈 형식별 score multiplier."""
    bo1_score: float
    bo3_score: float
    bo5_score: float

    def weight_for(self, series: SeriesKind) -> float:
        if series is SeriesKind.BO1:
            return self.bo1_score
        if series is SeriesKind.BO3:
            return self.bo3_score
        if series is SeriesKind.BO5:
            return self.bo5_score
        raise ValueError(f"not a SeriesKind: {series!r}")


def _number(value: Any, field: str) -> float:
    """설정 숫자 검증 (문자열/bool 거부, 유한값만 허용)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{field}: expected a number, got {value!r}")
    try:
        number = float(value)
    except OverflowError:
        raise ConfigError(f"{field}: must be finite, got an integer too large for a float") from None
    if not math.isfinite(number):
        raise ConfigError(f"{field}: must be finite, got {value!r}")
    return number


@dataclass(frozen=True)
class RatingConfig:
    """실행 중 불변인 rating 설정 (bracket table + series weight)."""
    brackets: BracketTable
    series_weights: SeriesWeights
    initial_rating: float = INITIAL_ELO

    def k_for(self, rating: float) -> float:
        return self.brackets.k_for(rating)

    def weight_for(self, series: SeriesKind) -> float:
        return self.series_weights.weight_for(series)

    @classmethod
    def from_dict(cls, data: Any) -> 'RatingConfig':
        if not isinstance(data, dict):
            raise ConfigError(f"config must be an object, got {type(data).__name__}")

        missing = [key for key in ('bo1_score', 'bo3_score', 'bo5_score', 'k_brackets')
                   if key not in data]
        if missing:
            raise ConfigError(f"config is missing required field(s): {', '.join(missing)}")

        weights = SeriesWeights(
            bo1_score=_number(data['bo1_score'], 'bo1_score'),
            bo3_score=_number(data['bo3_score'], 'bo3_score'),
            bo5_score=_number(data['bo5_score'], 'bo5_score'),
        )

        raw_brackets = data['k_brackets']
        if not isinstance(raw_brackets, list):
            raise ConfigError("k_brackets: expected a list of {start, k} objects")
        brackets = []
        for i, entry in enumerate(raw_brackets):
            if not isinstance(entry, dict):
                raise ConfigError(f"k_brackets[{i}]: expected an object, got {entry!r}")
            for key in ('start', 'k'):
                if key not in entry:
                    raise ConfigError(f"k_brackets[{i}]: missing field '{key}'")
            brackets.append(KBracket(
                start=_number(entry['start'], f"k_brackets[{i}].start"),
                k=_number(entry['k'], f"k_brackets[{i}].k"),
            ))

        initial = data.get('initial_rating')
        initial_rating = INITIAL_ELO if initial is None else _number(initial, 'initial_rating')

        return cls(
            brackets=BracketTable(brackets),
            series_weights=weights,
            initial_rating=initial_rating,
        )

    @classmethod
    def load(cls, config_path: Path | str | None = None) -> 'RatingConfig':
        """설정 파일 로드. 경로 미지정 시 ELO_CONFIG_PATH 또는 config.json."""
        path = Path(config_path) if config_path is not None else Path(default_config_path())
        with open(path, encoding='utf-8') as f:
            try:
                if path.suffix.lower() in YAML_SUFFIXES:
                    data = yaml.safe_load(f)
                else:
                    data = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigError(
                    f"{path}: malformed JSON at line {e.lineno} column {e.colno}: {e.msg}"
                ) from e
            except yaml.YAMLError as e:
                raise ConfigError(f"{path}: malformed config: {e}") from e
            except UnicodeDecodeError as e:
                raise ConfigError(f"{path}: not valid UTF-8: {e}") from e
        try:
            return cls.from_dict(data)
        except ConfigError as e:
            raise ConfigError(f"{path}: {e}") from e
