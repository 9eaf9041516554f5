"""Team ELO 설정 상수."""

import os

# 초기 ELO (처음 등장한 팀 기본값)
INITIAL_ELO = 1500.0

# Expected score logistic 분모
ELO_DIVISOR = 400.0

# 승/패 실제 점수 (무승부 없음)
WIN_SCORE = 1.0
LOSS_SCORE = 0.0

# 기본 설정 파일 (CLI 실행 디렉터리 기준)
DEFAULT_CONFIG_PATH = 'config.json'

# .env 로 기본 설정 경로 override
CONFIG_PATH_ENV = 'ELO_CONFIG_PATH'


def default_config_path() -> str:
    """환경변수 우선, 없으면 config.json."""
    return os.environ.get(CONFIG_PATH_ENV) or DEFAULT_CONFIG_PATH
