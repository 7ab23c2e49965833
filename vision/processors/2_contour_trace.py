"""
Stage 2: 윤곽선 추적

엣지 버퍼에서 8-연결 강한 엣지 픽셀(> 128)을 하나의 윤곽선으로 묶습니다.
- row-major 순서로 스캔
- 명시적 스택 기반 DFS (재귀 X, 큰 연결 영역에서도 안전)
- visited 마스크는 호출자 소유 스크래치 버퍼 (모듈 전역 상태 없음)
- 점 개수가 MIN_CONTOUR_POINTS 이하인 윤곽선은 노이즈로 제거
"""

import logging
from typing import List, Optional

import numpy as np

from vision.config import Config
from vision.types import Contour, EdgeBuffer, Point

logger = logging.getLogger(__name__)

# 8-연결 이웃 (push 순서 고정)
_NEIGHBOR_OFFSETS = [(dx, dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1)]


class ContourTracer:
    """
    연결 성분 기반 윤곽선 추적기

    전체 스캔에서 각 픽셀은 최대 한 번만 방문하므로
    윤곽선 개수와 무관하게 O(width × height) 단일 패스입니다.
    """

    def find_contours(self, edges: EdgeBuffer, visited: Optional[np.ndarray] = None) -> List[Contour]:
        """
        엣지 버퍼에서 윤곽선 목록을 추출합니다.

        Args:
            edges: (height, width) 엣지 버퍼
            visited: (height, width) bool 스크래치 버퍼 (None이면 새로 할당).
                     호출 시작 시 False로 초기화됩니다.

        Returns:
            윤곽선 리스트 (각 윤곽선은 방문 순서대로의 Point 리스트)
        """
        h, w = edges.shape
        if visited is None:
            visited = np.zeros((h, w), dtype=bool)
        elif visited.shape != (h, w):
            raise ValueError(f"visited shape {visited.shape} does not match edges {(h, w)}")
        else:
            visited[...] = False

        strong = edges > Config.WEAK_EDGE
        contours = []
        discarded = 0

        for index in np.flatnonzero(strong):
            y, x = divmod(int(index), w)
            if visited[y, x]:
                continue

            contour = self._trace(strong, visited, x, y)
            if len(contour) > Config.MIN_CONTOUR_POINTS:
                contours.append(contour)
            else:
                discarded += 1

        logger.debug(f"[ContourTracer] {len(contours)} contours kept, {discarded} discarded as noise")
        return contours

    @staticmethod
    def _trace(strong: np.ndarray, visited: np.ndarray, start_x: int, start_y: int) -> Contour:
        """시작 픽셀에서 8-연결 DFS로 하나의 연결 성분을 수집합니다."""
        h, w = strong.shape
        contour = []
        stack = [(start_x, start_y)]

        while stack:
            x, y = stack.pop()
            if visited[y, x] or not strong[y, x]:
                continue

            visited[y, x] = True
            contour.append(Point(float(x), float(y)))

            for dx, dy in _NEIGHBOR_OFFSETS:
                nx, ny = x + dx, y + dy
                if 0 <= nx < w and 0 <= ny < h and not visited[ny, nx] and strong[ny, nx]:
                    stack.append((nx, ny))

        return contour


def find_contours(edges: EdgeBuffer, visited: Optional[np.ndarray] = None) -> List[Contour]:
    """ContourTracer 단축 함수"""
    return ContourTracer().find_contours(edges, visited)
