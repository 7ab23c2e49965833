"""
Stage 5: 원근 리매핑

소스 원근에서 탐지된 객체의 바운딩 박스를 타겟 원근으로 근사 변환합니다.
- x, width: target.view_angle / source.view_angle 배율
- y, height: (1 - target.horizon_line) / (1 - source.horizon_line) 배율
- confidence: 변환 불확실성 페널티 (× 0.9)

원본 객체는 변경하지 않고 새 인스턴스를 반환합니다.
"""

import logging
from dataclasses import replace
from typing import List, Tuple

from vision.config import Config
from vision.exceptions import InvalidPerspective
from vision.types import BoundingBox, DetectedObject, PerspectiveData

logger = logging.getLogger(__name__)


class PerspectiveRemapper:
    """객체 목록을 소스 원근 → 타겟 원근으로 변환하는 순수 함수 모음"""

    @staticmethod
    def scale_factors(source: PerspectiveData, target: PerspectiveData) -> Tuple[float, float]:
        """
        (scale_x, scale_y)를 계산합니다.

        Raises:
            InvalidPerspective: source.view_angle == 0 또는 source.horizon_line == 1
        """
        if source.view_angle == 0:
            raise InvalidPerspective("source view_angle is 0 - cannot compute horizontal scale")
        if source.horizon_line == 1:
            raise InvalidPerspective("source horizon_line is 1 - cannot compute vertical scale")

        scale_x = target.view_angle / source.view_angle
        scale_y = (1 - target.horizon_line) / (1 - source.horizon_line)
        return scale_x, scale_y

    def transform_bounding_box(
        self,
        bbox: BoundingBox,
        source: PerspectiveData,
        target: PerspectiveData
    ) -> BoundingBox:
        scale_x, scale_y = self.scale_factors(source, target)
        return BoundingBox(
            x=bbox.x * scale_x,
            y=bbox.y * scale_y,
            width=bbox.width * scale_x,
            height=bbox.height * scale_y,
        )

    def remap(
        self,
        objects: List[DetectedObject],
        source: PerspectiveData,
        target: PerspectiveData
    ) -> List[DetectedObject]:
        """
        객체 목록을 타겟 원근으로 변환합니다.

        Args:
            objects: 소스 이미지에서 탐지된 객체
            source: 소스 이미지 원근
            target: 타겟 이미지 원근

        Returns:
            같은 길이/순서의 새 DetectedObject 리스트
        """
        # 빈 목록이어도 잘못된 소스 원근은 호출자에게 알림
        scale_x, scale_y = self.scale_factors(source, target)
        logger.debug(f"[PerspectiveRemapper] {len(objects)} objects, scale=({scale_x:.3f}, {scale_y:.3f})")

        return [
            replace(
                obj,
                bounding_box=self.transform_bounding_box(obj.bounding_box, source, target),
                confidence=obj.confidence * Config.REMAP_CONFIDENCE_FACTOR,
            )
            for obj in objects
        ]


def remap_objects(
    objects: List[DetectedObject],
    source: PerspectiveData,
    target: PerspectiveData
) -> List[DetectedObject]:
    """PerspectiveRemapper 단축 함수"""
    return PerspectiveRemapper().remap(objects, source, target)
