"""
Vision 파이프라인 예외

파이프라인 내부 단계는 예외 대신 기본값을 반환하며,
호출자가 반드시 처리해야 하는 두 가지 경우만 예외로 노출합니다.
"""


class VisionError(ValueError):
    """vision 패키지 예외의 기본 클래스"""


class InvalidBuffer(VisionError):
    """PixelBuffer 크기/길이가 맞지 않는 경우 (어댑터 경계에서 발생)"""


class InvalidPerspective(VisionError):
    """원근 리매핑 시 0으로 나누게 되는 소스 원근 데이터"""
