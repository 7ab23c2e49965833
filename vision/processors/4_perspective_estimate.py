"""
Stage 4: 직선 피팅 및 원근 추정

1. 엣지/윤곽선 재계산 (Stage 1-2)
2. 점이 MIN_LINE_POINTS보다 많은 윤곽선에 최소제곱 직선 피팅
3. 직선 쌍의 교차점 계산 (거의 평행한 쌍 제외)
4. 교차점 클러스터링 → 중심점을 소실점으로 사용 (최대 3개)
5. 소실점 평균 y로 수평선 계산 (이미지 높이 대비 비율)
6. 시야각 / 왜곡은 고정 추정값 (정밀 측정 아님)
"""

import importlib
import logging
import math
from typing import List, Optional

import numpy as np

from vision.config import Config
from vision.types import Contour, PerspectiveData, Point
from vision.utils.image_ops import PixelBuffer

# 숫자로 시작하는 모듈은 직접 import
_stage1 = importlib.import_module('vision.processors.1_edge_extract')
_stage2 = importlib.import_module('vision.processors.2_contour_trace')

logger = logging.getLogger(__name__)

# 직선은 양 끝점 2개로 표현 (피팅 실패 시 빈 리스트)
Line = List[Point]


class PerspectiveEstimator:
    """
    이미지 원근 추정기

    Hough 변환 대신 긴 윤곽선에 대한 선형 회귀로 직선을 구하는 단순화 버전.
    """

    def __init__(self):
        self.edge_extractor = _stage1.EdgeExtractor()
        self.contour_tracer = _stage2.ContourTracer()

    def analyze(self, buffer: PixelBuffer) -> PerspectiveData:
        """
        이미지의 원근 정보를 추정합니다.

        Args:
            buffer: RGBA PixelBuffer

        Returns:
            PerspectiveData (소실점 최대 3개, 수평선, 시야각, 왜곡)
        """
        lines = self.detect_lines(buffer)
        vanishing_points = self.find_vanishing_points(lines)

        perspective = PerspectiveData(
            vanishing_points=vanishing_points,
            horizon_line=self.calculate_horizon_line(vanishing_points, buffer.height),
            view_angle=self.estimate_view_angle(lines, vanishing_points),
            distortion=self.calculate_distortion(lines),
        )

        logger.debug(
            f"[PerspectiveEstimator] {len(lines)} lines, "
            f"{len(vanishing_points)} vanishing points, horizon={perspective.horizon_line:.3f}"
        )
        return perspective

    # =========================================================================
    # Lines
    # =========================================================================

    def detect_lines(self, buffer: PixelBuffer) -> List[Line]:
        """긴 윤곽선마다 피팅한 직선 목록"""
        edges = self.edge_extractor.extract(buffer)
        contours = self.contour_tracer.find_contours(edges)

        lines = []
        for contour in contours:
            if len(contour) > Config.MIN_LINE_POINTS:
                line = self.fit_line(contour)
                if len(line) >= 2:
                    lines.append(line)
        return lines

    @staticmethod
    def fit_line(points: Contour) -> Line:
        """
        최소제곱 회귀로 y = slope·x + intercept를 피팅합니다.

        Returns:
            [min_x 끝점, max_x 끝점]. 점이 2개 미만이거나 모든 점의 x가
            같아 기울기가 정의되지 않으면 빈 리스트.
        """
        n = len(points)
        if n < 2:
            return []

        sum_x = sum_y = sum_xy = sum_xx = 0.0
        for p in points:
            sum_x += p.x
            sum_y += p.y
            sum_xy += p.x * p.y
            sum_xx += p.x * p.x

        denominator = n * sum_xx - sum_x * sum_x
        if denominator == 0:
            return []

        slope = (n * sum_xy - sum_x * sum_y) / denominator
        intercept = (sum_y - slope * sum_x) / n

        min_x = min(p.x for p in points)
        max_x = max(p.x for p in points)
        return [
            Point(min_x, slope * min_x + intercept),
            Point(max_x, slope * max_x + intercept),
        ]

    @staticmethod
    def line_intersection(line1: Line, line2: Line) -> Optional[Point]:
        """두 직선(각 2점)의 교차점. 거의 평행하면 None"""
        if len(line1) < 2 or len(line2) < 2:
            return None

        p1, p2 = line1[0], line1[1]
        p3, p4 = line2[0], line2[1]

        denom = (p1.x - p2.x) * (p3.y - p4.y) - (p1.y - p2.y) * (p3.x - p4.x)
        if abs(denom) < Config.PARALLEL_EPSILON:
            return None

        a = p1.x * p2.y - p1.y * p2.x
        b = p3.x * p4.y - p3.y * p4.x
        x = (a * (p3.x - p4.x) - (p1.x - p2.x) * b) / denom
        y = (a * (p3.y - p4.y) - (p1.y - p2.y) * b) / denom
        return Point(x, y)

    # =========================================================================
    # Vanishing Points
    # =========================================================================

    def find_vanishing_points(self, lines: List[Line]) -> List[Point]:
        """모든 직선 쌍의 교차점을 클러스터링하여 앞의 최대 3개를 반환"""
        intersections = []
        for i in range(len(lines)):
            for j in range(i + 1, len(lines)):
                point = self.line_intersection(lines[i], lines[j])
                if point is not None:
                    intersections.append(point)

        clustered = self.cluster_points(intersections, Config.CLUSTER_DISTANCE)
        return clustered[:Config.MAX_VANISHING_POINTS]

    @staticmethod
    def cluster_points(points: List[Point], threshold: float) -> List[Point]:
        """
        순서대로 아직 사용되지 않은 점을 시드로 삼아, threshold 미만 거리의
        미사용 점을 모두 흡수한 뒤 각 클러스터를 중심점으로 대체합니다.
        """
        if not points:
            return []

        xs = np.array([p.x for p in points], dtype=np.float64)
        ys = np.array([p.y for p in points], dtype=np.float64)
        used = np.zeros(len(points), dtype=bool)
        centroids = []

        for i in range(len(points)):
            if used[i]:
                continue
            used[i] = True

            distance = np.sqrt((xs[i] - xs) ** 2 + (ys[i] - ys) ** 2)
            members = (~used) & (distance < threshold)
            used |= members

            cluster_x = [float(xs[i])] + xs[members].tolist()
            cluster_y = [float(ys[i])] + ys[members].tolist()
            centroids.append(Point(sum(cluster_x) / len(cluster_x), sum(cluster_y) / len(cluster_y)))

        return centroids

    # =========================================================================
    # Scene Geometry
    # =========================================================================

    @staticmethod
    def calculate_horizon_line(vanishing_points: List[Point], image_height: int) -> float:
        """
        소실점 평균 y / 이미지 높이, [0, 1]로 제한. 소실점이 없으면 0.5

        소실점이 모두 이미지 아래쪽에 있으면 1.0이 되며, 이 결과를
        PerspectiveRemapper의 소스 원근으로 쓰면 InvalidPerspective가 발생합니다.
        """
        if not vanishing_points:
            return Config.DEFAULT_HORIZON_LINE

        avg_y = sum(p.y for p in vanishing_points) / len(vanishing_points)
        return min(1.0, max(0.0, avg_y / image_height))

    @staticmethod
    def estimate_view_angle(lines: List[Line], vanishing_points: List[Point]) -> float:
        # TODO: 소실점 간 거리와 초점거리 관계로 실제 시야각 계산
        return Config.DEFAULT_VIEW_ANGLE

    @staticmethod
    def calculate_distortion(lines: List[Line]) -> float:
        return Config.DEFAULT_DISTORTION


def analyze_perspective(buffer: PixelBuffer) -> PerspectiveData:
    """PerspectiveEstimator 단축 함수"""
    return PerspectiveEstimator().analyze(buffer)
