"""
Stage 1: 엣지 추출 (Canny 방식)

RGBA PixelBuffer → (height, width) 엣지 버퍼
1. 그레이스케일 변환
2. 3x3 가우시안 블러 (내부 픽셀만)
3. Sobel 그라디언트 (크기 + 방향)
4. Non-Maximum Suppression
5. 이중 임계값 (0 / 128 약한 엣지 / 255 강한 엣지)

테스트 재현성을 위해 모든 반올림/클램핑을 명시적으로 수행합니다.
경계 픽셀(0행/열, 마지막 행/열)은 2~4단계에서 처리하지 않으므로 항상 0.
"""

import logging
from typing import Tuple

import cv2
import numpy as np

from vision.config import Config
from vision.types import EdgeBuffer
from vision.utils.image_ops import PixelBuffer

logger = logging.getLogger(__name__)

_PI_8 = np.pi / 8
_3PI_8 = 3 * np.pi / 8
_5PI_8 = 5 * np.pi / 8


def _saturate_u8(values: np.ndarray) -> np.ndarray:
    """반올림(half-to-even) 후 [0, 255]로 포화시켜 uint8로 저장"""
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)


class EdgeExtractor:
    """
    Canny 방식 엣지 추출기

    상태를 갖지 않으며 호출마다 새 출력 버퍼를 할당합니다.
    같은 입력에 대해 항상 바이트 단위로 동일한 결과를 반환합니다.
    """

    def __init__(self):
        self.gaussian_kernel = np.array(Config.GAUSSIAN_KERNEL, dtype=np.float64)
        self.sobel_x = np.array(Config.SOBEL_X, dtype=np.float64)
        self.sobel_y = np.array(Config.SOBEL_Y, dtype=np.float64)

    def extract(self, buffer: PixelBuffer) -> EdgeBuffer:
        """
        PixelBuffer에서 엣지 버퍼를 추출합니다.

        Args:
            buffer: RGBA PixelBuffer

        Returns:
            (height, width) uint8 배열, 값은 {0, 128, 255}
        """
        h, w = buffer.height, buffer.width

        # 내부 픽셀이 없으면 전부 경계
        if h < 3 or w < 3:
            return np.zeros((h, w), dtype=np.uint8)

        gray = self.to_grayscale(buffer)
        blurred = self.gaussian_blur(gray)
        magnitude, direction = self.calculate_gradients(blurred)
        suppressed = self.non_maximum_suppression(magnitude, direction)
        edges = self.double_threshold(suppressed)

        logger.debug(
            f"[EdgeExtractor] {w}x{h}: strong={int((edges == Config.STRONG_EDGE).sum())}, "
            f"weak={int((edges == Config.WEAK_EDGE).sum())}"
        )
        return edges

    @staticmethod
    def to_grayscale(buffer: PixelBuffer) -> np.ndarray:
        """gray = round(0.299R + 0.587G + 0.114B), 0.5는 올림"""
        rgba = buffer.to_array().astype(np.float64)
        wr, wg, wb = Config.GRAY_WEIGHTS
        gray = wr * rgba[:, :, 0] + wg * rgba[:, :, 1] + wb * rgba[:, :, 2]
        return np.clip(np.floor(gray + 0.5), 0, 255).astype(np.uint8)

    def _correlate(self, image: np.ndarray, kernel: np.ndarray) -> np.ndarray:
        # filter2D는 correlation (커널 뒤집지 않음), 경계 값은 이후 버려짐
        return cv2.filter2D(
            image.astype(np.float64), cv2.CV_64F, kernel,
            borderType=cv2.BORDER_REPLICATE
        )

    def gaussian_blur(self, gray: np.ndarray) -> np.ndarray:
        """3x3 가우시안 블러. 경계 1px은 0으로 남김"""
        h, w = gray.shape
        blurred = np.zeros((h, w), dtype=np.uint8)

        summed = self._correlate(gray, self.gaussian_kernel)
        blurred[1:-1, 1:-1] = _saturate_u8(summed[1:-1, 1:-1] / Config.GAUSSIAN_KERNEL_SUM)
        return blurred

    def calculate_gradients(self, blurred: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        Sobel 그라디언트를 계산합니다.

        Returns:
            (magnitude uint8, direction float32 라디안) - 경계는 0
        """
        h, w = blurred.shape
        magnitude = np.zeros((h, w), dtype=np.uint8)
        direction = np.zeros((h, w), dtype=np.float32)

        gx = self._correlate(blurred, self.sobel_x)[1:-1, 1:-1]
        gy = self._correlate(blurred, self.sobel_y)[1:-1, 1:-1]

        magnitude[1:-1, 1:-1] = _saturate_u8(np.sqrt(gx * gx + gy * gy))
        direction[1:-1, 1:-1] = np.arctan2(gy, gx).astype(np.float32)
        return magnitude, direction

    @staticmethod
    def non_maximum_suppression(magnitude: np.ndarray, direction: np.ndarray) -> np.ndarray:
        """
        그라디언트 방향 기준 양쪽 이웃보다 작으면 제거합니다.

        방향 구간:
            [-π/8, π/8)   → (±1, 0)
            [π/8, 3π/8)   → (±1, ±1)
            [3π/8, 5π/8)  → (0, ±1)
            그 외          → (-1, +1) / (+1, -1)
        """
        h, w = magnitude.shape
        suppressed = np.zeros((h, w), dtype=np.uint8)

        center = magnitude[1:-1, 1:-1]
        angle = direction[1:-1, 1:-1].astype(np.float64)

        def neighbor(dx: int, dy: int) -> np.ndarray:
            return magnitude[1 + dy:h - 1 + dy, 1 + dx:w - 1 + dx]

        buckets = [
            (angle >= -_PI_8) & (angle < _PI_8),
            (angle >= _PI_8) & (angle < _3PI_8),
            (angle >= _3PI_8) & (angle < _5PI_8),
        ]
        forward = np.select(buckets, [neighbor(1, 0), neighbor(1, 1), neighbor(0, 1)], default=neighbor(-1, 1))
        backward = np.select(buckets, [neighbor(-1, 0), neighbor(-1, -1), neighbor(0, -1)], default=neighbor(1, -1))

        keep = (center >= forward) & (center >= backward)
        suppressed[1:-1, 1:-1] = np.where(keep, center, 0)
        return suppressed

    @staticmethod
    def double_threshold(suppressed: np.ndarray) -> EdgeBuffer:
        """≥high → 255, [low, high) → 128, 나머지 → 0"""
        low, high = Config.get_thresholds()
        edges = np.zeros(suppressed.shape, dtype=np.uint8)
        edges[suppressed >= low] = Config.WEAK_EDGE
        edges[suppressed >= high] = Config.STRONG_EDGE
        return edges


def extract_edges(buffer: PixelBuffer) -> EdgeBuffer:
    """EdgeExtractor 단축 함수"""
    return EdgeExtractor().extract(buffer)
