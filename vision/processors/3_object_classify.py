"""
Stage 3: 형태 기반 객체 분류

윤곽선마다 바운딩 박스 / 종횡비 / 둘레 / 원형도를 계산하고,
Knowledge Base의 고정 결정 리스트로 가구 카테고리와 신뢰도를 부여합니다.
바운딩 박스 내부를 5px 간격으로 샘플링하여 대표 색상도 추출합니다.
"""

import logging
import math
from collections import Counter
from typing import List

import numpy as np

from vision.config import Config
from vision.data.knowledge_base import (
    ColorName,
    match_category,
    rgb_to_color_name,
    dominant_color
)
from vision.types import BoundingBox, Contour, DetectedObject, ObjectType
from vision.utils.image_ops import PixelBuffer

logger = logging.getLogger(__name__)


class ObjectClassifier:
    """
    윤곽선 → DetectedObject 분류기

    Knowledge Base의 CLASSIFICATION_RULES를 순서대로 평가하여
    첫 번째로 매칭되는 카테고리를 사용합니다.
    """

    def classify(self, contours: List[Contour], buffer: PixelBuffer) -> List[DetectedObject]:
        """
        윤곽선 목록을 분류합니다.

        Args:
            contours: ContourTracer 출력
            buffer: 색상 샘플링용 원본 PixelBuffer

        Returns:
            DetectedObject 리스트 (면적 < MIN_OBJECT_AREA인 윤곽선은 제외).
            id는 입력 윤곽선 인덱스 기반 "obj-<index>"
        """
        pixels = buffer.to_array()
        objects = []

        for index, contour in enumerate(contours):
            if not contour:
                continue

            bbox = self.calculate_bounding_box(contour)
            area = bbox.area

            # 너무 작은 객체는 노이즈
            if area < Config.MIN_OBJECT_AREA:
                continue

            aspect_ratio = bbox.width / bbox.height
            perimeter = len(contour)
            circularity = 4 * math.pi * area / (perimeter * perimeter)

            category, confidence = match_category(aspect_ratio, area, circularity)
            color = self.extract_dominant_color(pixels, bbox)

            objects.append(DetectedObject(
                id=f"obj-{index}",
                type=ObjectType.FURNITURE,
                name=category.value,
                bounding_box=bbox,
                confidence=confidence,
                style=Config.DEFAULT_STYLE,
                material=Config.DEFAULT_MATERIAL,
                color=color.value
            ))

        logger.debug(f"[ObjectClassifier] {len(objects)}/{len(contours)} contours classified")
        return objects

    @staticmethod
    def calculate_bounding_box(contour: Contour) -> BoundingBox:
        """윤곽선 점들의 min/max로 축 정렬 박스 계산"""
        xs = [p.x for p in contour]
        ys = [p.y for p in contour]
        min_x, max_x = min(xs), max(xs)
        min_y, max_y = min(ys), max(ys)
        return BoundingBox(x=min_x, y=min_y, width=max_x - min_x, height=max_y - min_y)

    @staticmethod
    def extract_dominant_color(pixels: np.ndarray, bbox: BoundingBox) -> ColorName:
        """
        바운딩 박스 내부를 COLOR_SAMPLE_STRIDE 간격으로 샘플링해 최빈 색상을 반환합니다.
        y는 [y, y+height), x는 [x, x+width) 범위.
        """
        stride = Config.COLOR_SAMPLE_STRIDE
        x0, y0 = int(bbox.x), int(bbox.y)
        x1, y1 = int(bbox.x + bbox.width), int(bbox.y + bbox.height)

        samples = pixels[y0:y1:stride, x0:x1:stride, :3].reshape(-1, 3)
        counts = Counter(rgb_to_color_name(r, g, b) for r, g, b in samples.tolist())
        return dominant_color(counts)


def classify_objects(contours: List[Contour], buffer: PixelBuffer) -> List[DetectedObject]:
    """ObjectClassifier 단축 함수"""
    return ObjectClassifier().classify(contours, buffer)
