import os
from typing import List, Tuple


class Config:
    # --- Grayscale ---
    # ITU-R BT.601 가중치 (R, G, B)
    GRAY_WEIGHTS: Tuple[float, float, float] = (0.299, 0.587, 0.114)

    # --- Kernels ---
    # 3x3 가우시안 근사 커널 (합계 16)
    GAUSSIAN_KERNEL: List[List[int]] = [
        [1, 2, 1],
        [2, 4, 2],
        [1, 2, 1],
    ]
    GAUSSIAN_KERNEL_SUM = 16

    SOBEL_X: List[List[int]] = [
        [-1, 0, 1],
        [-2, 0, 2],
        [-1, 0, 1],
    ]
    SOBEL_Y: List[List[int]] = [
        [-1, -2, -1],
        [0, 0, 0],
        [1, 2, 1],
    ]

    # --- Edge Thresholds ---
    # 결과 재현성을 위해 고정값 사용 (자동 임계값 X)
    EDGE_LOW_THRESHOLD = 50
    EDGE_HIGH_THRESHOLD = 150
    WEAK_EDGE = 128
    STRONG_EDGE = 255

    # --- Contours ---
    # 이 값 이하의 점으로 구성된 윤곽선은 노이즈로 간주
    MIN_CONTOUR_POINTS = 10

    # --- Classification ---
    MIN_OBJECT_AREA = 1000
    COLOR_SAMPLE_STRIDE = 5
    DEFAULT_STYLE = "unknown"
    DEFAULT_MATERIAL = "unknown"

    # --- Perspective ---
    MIN_LINE_POINTS = 20
    PARALLEL_EPSILON = 0.001
    CLUSTER_DISTANCE = 50.0
    MAX_VANISHING_POINTS = 3
    DEFAULT_HORIZON_LINE = 0.5
    # 실제 추정 알고리즘이 아닌 고정 추정값 (DESIGN.md 참고)
    DEFAULT_VIEW_ANGLE = 60.0
    DEFAULT_DISTORTION = 0.1

    # --- Remapping ---
    # 원근 변환 후 불확실성 페널티
    REMAP_CONFIDENCE_FACTOR = 0.9

    # --- Input Limits ---
    # 파이프라인 진입 전 최대 해상도 (긴 변 기준 px)
    MAX_IMAGE_SIZE = int(os.environ.get("VISION_MAX_IMAGE_SIZE", "1024"))

    # 배치 분석 시 최대 동시 처리 수
    MAX_CONCURRENT = int(os.environ.get("VISION_MAX_CONCURRENT", "3"))

    @staticmethod
    def get_thresholds() -> Tuple[int, int]:
        """
        이중 임계값 (low, high)을 반환합니다.

        Returns:
            (EDGE_LOW_THRESHOLD, EDGE_HIGH_THRESHOLD)
        """
        return Config.EDGE_LOW_THRESHOLD, Config.EDGE_HIGH_THRESHOLD
