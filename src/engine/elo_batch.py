"""
Team ELO Batch Processor

Match 목록을 입력 순서대로 처리하여 standings(팀 → rating)를 갱신.
각 match는 앞선 모든 match의 결과가 반영된 rating을 사용 (batch 동시 적용 없음).

Usage:
    batch = EloBatch(config, initial_standings={'A': 1000.0, 'B': 1000.0})
    batch.process(match_df)
    # Results:
    batch.ratings        → {team: TeamRating}
    batch.match_details  → [MatchUpdateResult, ...]
    batch.get_standings() → {team: rating}
"""

import copy
import logging
import math
from typing import Optional

import pandas as pd

from src.engine.elo_calculator import EloCalculator, MatchUpdateResult, TeamRating
from src.engine.errors import ComputationError, MatchParseError
from src.engine.rating_config import RatingConfig, SeriesKind

logger = logging.getLogger(__name__)


class EloBatch:
    """Team ELO 배치 프로세서."""

    def __init__(self, config: RatingConfig,
                 initial_standings: Optional[dict[str, float]] = None):
        self.config = config
        self.calc = EloCalculator(config)
        self.ratings: dict[str, TeamRating] = {}
        self.match_details: list[MatchUpdateResult] = []
        self.new_teams: list[str] = []

        for team, rating in (initial_standings or {}).items():
            rating = float(rating)
            if not math.isfinite(rating):
                raise ComputationError(f"initial rating for '{team}' is not finite: {rating!r}")
            self.ratings[team] = TeamRating(team=team, rating=rating)

    def get_team(self, team: str) -> TeamRating:
        """팀 상태 조회. 처음 등장한 팀은 기본 rating으로 등록."""
        if team not in self.ratings:
            logger.warning(f"  New team '{team}' → default rating {self.config.initial_rating:g}")
            self.ratings[team] = TeamRating(team=team, rating=self.config.initial_rating)
            self.new_teams.append(team)
        return self.ratings[team]

    def process(self, match_df: pd.DataFrame):
        """
        전체 match DataFrame 처리 (행 순서 = 처리 순서).

        match_df 컬럼: winner, loser, series (+ optional match_index)

        실패 시 ratings / match_details / new_teams 는 호출 전 상태 유지.
        """
        snapshot = (copy.deepcopy(self.ratings), list(self.match_details), list(self.new_teams))
        total = len(match_df)

        try:
            for pos, (_, row) in enumerate(match_df.iterrows()):
                match_index = int(row['match_index']) if 'match_index' in row else pos
                self._process_row(match_index, row)
        except Exception:
            self.ratings, self.match_details, self.new_teams = snapshot
            raise

        logger.info(f"  Completed {total:,} matches, {len(self.ratings):,} teams "
                    f"({len(self.new_teams):,} new)")

    def _process_row(self, match_index: int, row: pd.Series) -> MatchUpdateResult:
        winner_name = row['winner']
        loser_name = row['loser']
        try:
            series = SeriesKind.parse(row['series'])
        except ValueError as e:
            raise MatchParseError(f"matches[{match_index}].series: {e}") from None
        if winner_name == loser_name:
            raise MatchParseError(
                f"matches[{match_index}]: winner and loser are the same team '{winner_name}'"
            )

        winner = self.get_team(winner_name)
        loser = self.get_team(loser_name)

        try:
            result = self.calc.process_match(winner, loser, series)
        except ComputationError as e:
            raise ComputationError(f"matches[{match_index}]: {e}") from e

        logger.debug(
            f"  #{match_index} {result.winner} def. {result.loser} ({series.value}): "
            f"{result.winner_before:.1f}→{result.winner_after:.1f} / "
            f"{result.loser_before:.1f}→{result.loser_after:.1f}"
        )
        self.match_details.append(result)
        return result

    def get_standings(self) -> dict[str, float]:
        """standings 출력용 {team: rating} (기존 팀 입력 순서, 신규 팀 등장 순서)."""
        return {team: state.rating for team, state in self.ratings.items()}
