"""Rating 계산 오류 타입.

모두 ValueError 하위 클래스. I/O 오류는 OSError 그대로 전파.
"""


class ConfigError(ValueError):
    """설정 파일/값 오류 (빈 bracket table, 잘못된 숫자 등)."""


class MatchParseError(ValueError):
    """matches / standings 입력 형식 오류."""


class ComputationError(ValueError):
    """계산 결과가 유한하지 않거나 match 처리 실패."""
