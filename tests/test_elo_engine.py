"""Team ELO Calculator 테스트."""

import pytest

from src.engine.elo_config import INITIAL_ELO, ELO_DIVISOR
from src.engine.elo_calculator import EloCalculator, TeamRating, expected_score
from src.engine.errors import ComputationError
from src.engine.rating_config import (
    BracketTable, KBracket, RatingConfig, SeriesKind, SeriesWeights,
)


def _config(brackets=((0, 32),), bo1=1.0, bo3=1.0, bo5=1.0) -> RatingConfig:
    return RatingConfig(
        brackets=BracketTable([KBracket(start=s, k=k) for s, k in brackets]),
        series_weights=SeriesWeights(bo1_score=bo1, bo3_score=bo3, bo5_score=bo5),
    )


# === Config Tests ===

def test_config_constants():
    """ELO 설정 상수 확인."""
    assert INITIAL_ELO == 1500.0
    assert ELO_DIVISOR == 400.0


# === expected_score Tests ===

def test_expected_score_equal_ratings():
    assert expected_score(1000.0, 1000.0) == 0.5


def test_expected_score_400_gap():
    """400점 차이 → 10:1 odds."""
    assert abs(expected_score(1400.0, 1000.0) - 10 / 11) < 1e-12
    assert abs(expected_score(1000.0, 1400.0) - 1 / 11) < 1e-12


def test_expected_scores_sum_to_one():
    e = expected_score(1732.5, 1488.0)
    assert abs(e + expected_score(1488.0, 1732.5) - 1.0) < 1e-12


def test_expected_score_extreme_gap_no_overflow():
    """극단적 격차에서도 OverflowError 없이 0 / 1 수렴."""
    assert expected_score(0.0, 1e6) == 0.0
    assert expected_score(1e6, 0.0) == 1.0


# === TeamRating Tests ===

def test_team_rating_defaults():
    state = TeamRating(team='A')
    assert state.rating == INITIAL_ELO
    assert state.matches_played == 0


def test_team_rating_apply_delta():
    state = TeamRating(team='A', rating=1000.0)
    state.apply_delta(-12.5)
    assert state.rating == 987.5
    assert state.matches_played == 1


# === EloCalculator Tests ===

def test_concrete_scenario():
    """A=1000, B=1000, K=32, weight 1 → A=1016, B=984."""
    calc = EloCalculator(_config())
    a = TeamRating(team='A', rating=1000.0)
    b = TeamRating(team='B', rating=1000.0)

    result = calc.process_match(a, b, SeriesKind.BO1)

    assert result.expected_winner == 0.5
    assert abs(a.rating - 1016.0) < 1e-9
    assert abs(b.rating - 984.0) < 1e-9
    assert result.winner_after == a.rating
    assert result.loser_after == b.rating


def test_delta_formula_per_side():
    """각 delta = K_side × w × (actual - expected)."""
    config = _config(brackets=((0, 40), (1600, 20)), bo3=1.25)
    calc = EloCalculator(config)
    winner = TeamRating(team='W', rating=1450.0)
    loser = TeamRating(team='L', rating=1700.0)

    result = calc.process_match(winner, loser, SeriesKind.BO3)

    e_w = 1 / (1 + 10 ** ((1700.0 - 1450.0) / 400))
    assert abs(result.winner_delta - 40 * 1.25 * (1 - e_w)) < 1e-9
    assert abs(result.loser_delta - 20 * 1.25 * (0 - (1 - e_w))) < 1e-9


def test_k_resolved_from_each_side_own_rating():
    """winner/loser가 다른 bracket이면 K도 다름 (zero-sum 아님)."""
    calc = EloCalculator(_config(brackets=((0, 40), (1600, 20))))
    winner = TeamRating(team='W', rating=1500.0)
    loser = TeamRating(team='L', rating=1650.0)

    result = calc.process_match(winner, loser, SeriesKind.BO1)

    assert result.k_winner == 40
    assert result.k_loser == 20
    assert abs(result.winner_delta + result.loser_delta) > 1e-6


def test_zero_sum_when_same_bracket():
    calc = EloCalculator(_config())
    a = TeamRating(team='A', rating=1210.0)
    b = TeamRating(team='B', rating=1100.0)

    result = calc.process_match(a, b, SeriesKind.BO5)

    assert abs(result.winner_delta + result.loser_delta) < 1e-9


def test_winner_gains_loser_drops():
    calc = EloCalculator(_config())
    a = TeamRating(team='A', rating=1800.0)
    b = TeamRating(team='B', rating=1200.0)

    result = calc.process_match(a, b, SeriesKind.BO1)

    assert result.winner_delta > 0
    assert result.loser_delta < 0


def test_series_weight_ratio():
    """동일 rating/K에서 Bo3 : Bo1 delta 비율 = bo3_score : bo1_score."""
    calc = EloCalculator(_config(bo1=1.0, bo3=1.5))

    bo1 = calc.process_match(TeamRating('A', 1000.0), TeamRating('B', 1100.0), SeriesKind.BO1)
    bo3 = calc.process_match(TeamRating('A', 1000.0), TeamRating('B', 1100.0), SeriesKind.BO3)

    assert abs(bo3.winner_delta / bo1.winner_delta - 1.5) < 1e-9
    assert abs(bo3.loser_delta / bo1.loser_delta - 1.5) < 1e-9


def test_zero_weight_leaves_ratings_unchanged():
    calc = EloCalculator(_config(bo5=0.0))
    a = TeamRating('A', 1000.0)
    b = TeamRating('B', 1000.0)

    calc.process_match(a, b, SeriesKind.BO5)

    assert a.rating == 1000.0
    assert b.rating == 1000.0
    assert a.matches_played == 1


def test_non_finite_result_raises_without_mutation():
    """overflow로 inf가 나오면 ComputationError, 상태 변경 없음."""
    calc = EloCalculator(_config(brackets=((0, 1e308),), bo1=10.0))
    a = TeamRating('A', 1000.0)
    b = TeamRating('B', 1000.0)

    with pytest.raises(ComputationError):
        calc.process_match(a, b, SeriesKind.BO1)

    assert a.rating == 1000.0
    assert b.rating == 1000.0
    assert a.matches_played == 0


def test_non_finite_input_rating_raises():
    calc = EloCalculator(_config())
    with pytest.raises(ComputationError):
        calc.process_match(TeamRating('A', float('nan')), TeamRating('B', 1000.0), SeriesKind.BO1)
