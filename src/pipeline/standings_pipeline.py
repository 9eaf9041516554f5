"""Standings Pipeline: match 결과로 팀 ELO standings 갱신.

Flow:
    1. 설정 로드 (bracket table + series weight)
    2. 기존 standings 로드
    3. matches 로드 (배열 순서 = 처리 순서)
    4. EloBatch 순차 계산
    5. 전체 성공 시에만 output 저장 (부분 결과 저장 없음)
"""

import logging
from pathlib import Path

from src.engine.elo_batch import EloBatch
from src.engine.rating_config import RatingConfig
from src.etl.match_loader import load_matches, load_standings, write_standings

logger = logging.getLogger(__name__)


def run_standings_pipeline(
    matches_path: Path | str,
    standings_path: Path | str,
    output_path: Path | str,
    config_path: Path | str | None = None,
) -> dict:
    """메인 파이프라인.

    Args:
        matches_path: match 결과 JSON
        standings_path: 현재 standings JSON
        output_path: 갱신된 standings 저장 경로
        config_path: 설정 파일 (None이면 ELO_CONFIG_PATH 또는 config.json)

    Returns:
        dict with status and stats (batch 포함)
    """
    logger.info("=== Standings Pipeline ===")

    # 1. 설정
    config = RatingConfig.load(config_path)
    logger.info(f"  Config: {config.brackets!r}, weights={config.series_weights}")

    # 2-3. 입력
    standings = load_standings(standings_path)
    match_df = load_matches(matches_path)

    # 4. 계산
    logger.info("  Running ELO calculation...")
    batch = EloBatch(config, initial_standings=standings)
    batch.process(match_df)

    # 5. 저장
    write_standings(output_path, batch.get_standings())

    result = {
        'status': 'success',
        'match_count': len(match_df),
        'team_count': len(batch.ratings),
        'new_teams': list(batch.new_teams),
        'output': str(output_path),
        'batch': batch,
    }
    logger.info(f"  === Done: {result['match_count']} matches, {result['team_count']} teams ===")
    return result
