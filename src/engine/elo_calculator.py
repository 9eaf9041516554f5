"""
Team ELO Calculator (K-bracket + Series weight)

핵심 공식:
  E_winner     = 1 / (1 + 10^((R_loser - R_winner) / 400))
  E_loser      = 1 - E_winner
  K_winner     = k_for(R_winner)      (각 팀 자신의 현재 rating 기준)
  K_loser      = k_for(R_loser)
  w            = weight_for(series)   (Bo1 / Bo3 / Bo5)
  winner_delta = K_winner × w × (1 - E_winner)
  loser_delta  = K_loser  × w × (0 - E_loser)

Key Features:
  - Bracket별 K가 다를 수 있으므로 Zero-Sum 아님
  - 무승부 없음: 모든 match는 winner/loser 확정
  - 결과 rating이 유한하지 않으면 상태 변경 전에 ComputationError
"""

import math
from dataclasses import dataclass

from src.engine.elo_config import ELO_DIVISOR, INITIAL_ELO, LOSS_SCORE, WIN_SCORE
from src.engine.errors import ComputationError
from src.engine.rating_config import RatingConfig, SeriesKind


def expected_score(rating: float, opponent_rating: float) -> float:
    """rating 쪽의 기대 승률 (logistic)."""
    try:
        return 1.0 / (1.0 + 10.0 ** ((opponent_rating - rating) / ELO_DIVISOR))
    except OverflowError:
        # 격차가 ~123,000점 이상이면 10**x overflow → 극한값 0
        return 0.0


@dataclass
class TeamRating:
    """팀 ELO 상태 (Rating Store 항목)."""
    team: str
    rating: float = INITIAL_ELO
    matches_played: int = 0

    def apply_delta(self, delta: float) -> None:
        self.rating += delta
        self.matches_played += 1


@dataclass
class MatchUpdateResult:
    """Match 1건 ELO 업데이트 결과."""
    winner: str
    loser: str
    series: SeriesKind
    winner_before: float
    winner_after: float
    loser_before: float
    loser_after: float
    k_winner: float
    k_loser: float
    weight: float
    expected_winner: float

    @property
    def winner_delta(self) -> float:
        return self.winner_after - self.winner_before

    @property
    def loser_delta(self) -> float:
        return self.loser_after - self.loser_before


class EloCalculator:
    """Team ELO 계산기."""

    def __init__(self, config: RatingConfig):
        self.config = config

    def process_match(
        self,
        winner: TeamRating,
        loser: TeamRating,
        series: SeriesKind,
    ) -> MatchUpdateResult:
        """
        Match 결과 처리.

        Args:
            winner: 승리 팀 상태 (in-place 갱신)
            loser: 패배 팀 상태 (in-place 갱신)
            series: 시리즈 형식

        Returns:
            MatchUpdateResult

        Raises:
            ComputationError: 입력/결과 rating이 유한하지 않을 때 (상태 변경 없음)
        """
        winner_before = winner.rating
        loser_before = loser.rating

        expected_winner = expected_score(winner_before, loser_before)
        expected_loser = 1.0 - expected_winner

        k_winner = self.config.k_for(winner_before)
        k_loser = self.config.k_for(loser_before)
        weight = self.config.weight_for(series)

        winner_delta = k_winner * weight * (WIN_SCORE - expected_winner)
        loser_delta = k_loser * weight * (LOSS_SCORE - expected_loser)

        winner_after = winner_before + winner_delta
        loser_after = loser_before + loser_delta
        if not (math.isfinite(winner_after) and math.isfinite(loser_after)):
            raise ComputationError(
                f"non-finite rating after {winner.team} def. {loser.team} "
                f"({series.value}): {winner_after!r} / {loser_after!r}"
            )

        winner.apply_delta(winner_delta)
        loser.apply_delta(loser_delta)

        return MatchUpdateResult(
            winner=winner.team,
            loser=loser.team,
            series=series,
            winner_before=winner_before,
            winner_after=winner.rating,
            loser_before=loser_before,
            loser_after=loser.rating,
            k_winner=k_winner,
            k_loser=k_loser,
            weight=weight,
            expected_winner=expected_winner,
        )
