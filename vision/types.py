"""
Vision 데이터 모델

파이프라인 단계 사이에서 주고받는 값 타입 정의.
모든 레코드는 불변(frozen)이며, to_dict()/to_json()으로
camelCase JSON 형태(boundingBox, vanishingPoints 등)를 출력합니다.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Any
import json

import numpy as np


# 엣지 버퍼: (height, width) uint8, 값은 {0, 128, 255}
EdgeBuffer = np.ndarray


class ObjectType(str, Enum):
    """탐지 객체의 대분류"""
    FURNITURE = "furniture"
    APPLIANCE = "appliance"
    DECORATION = "decoration"
    STRUCTURAL = "structural"


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: Dict) -> "Point":
        return cls(x=float(data["x"]), y=float(data["y"]))


# 윤곽선: 하나의 연결 엣지 성분에 속한 점들 (추적 순서)
Contour = List[Point]


@dataclass(frozen=True)
class BoundingBox:
    """원본 이미지 픽셀 좌표 기준 축 정렬 박스"""
    x: float
    y: float
    width: float
    height: float

    @property
    def area(self) -> float:
        return self.width * self.height

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: Dict) -> "BoundingBox":
        return cls(
            x=float(data["x"]),
            y=float(data["y"]),
            width=float(data["width"]),
            height=float(data["height"]),
        )


@dataclass(frozen=True)
class DetectedObject:
    """탐지된 객체 정보 (Remapper는 새 인스턴스를 만들어 반환)"""
    id: str
    type: ObjectType
    name: str                       # FurnitureCategory 라벨
    bounding_box: BoundingBox
    confidence: float               # [0, 1]
    style: str = "unknown"
    material: str = "unknown"
    color: str = "gray"             # ColorName 라벨

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "name": self.name,
            "boundingBox": self.bounding_box.to_dict(),
            "confidence": self.confidence,
            "style": self.style,
            "material": self.material,
            "color": self.color,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: Dict) -> "DetectedObject":
        return cls(
            id=data["id"],
            type=ObjectType(data.get("type", ObjectType.FURNITURE.value)),
            name=data["name"],
            bounding_box=BoundingBox.from_dict(data["boundingBox"]),
            confidence=float(data["confidence"]),
            style=data.get("style", "unknown"),
            material=data.get("material", "unknown"),
            color=data.get("color", "gray"),
        )


@dataclass(frozen=True)
class PerspectiveData:
    """이미지 1장의 원근 정보 (소실점 최대 3개)"""
    vanishing_points: List[Point] = field(default_factory=list)
    horizon_line: float = 0.5       # 이미지 높이 대비 비율 [0, 1]
    view_angle: float = 60.0        # degrees
    distortion: float = 0.1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vanishingPoints": [p.to_dict() for p in self.vanishing_points],
            "horizonLine": self.horizon_line,
            "viewAngle": self.view_angle,
            "distortion": self.distortion,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: Dict) -> "PerspectiveData":
        return cls(
            vanishing_points=[Point.from_dict(p) for p in data.get("vanishingPoints", [])],
            horizon_line=float(data["horizonLine"]),
            view_angle=float(data["viewAngle"]),
            distortion=float(data["distortion"]),
        )


@dataclass(frozen=True)
class ImageAnalysis:
    """탐지 경로 + 원근 경로의 통합 결과"""
    objects: List[DetectedObject]
    perspective: PerspectiveData
    room_type: str = "unknown"
    confidence: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "objects": [obj.to_dict() for obj in self.objects],
            "perspective": self.perspective.to_dict(),
            "roomType": self.room_type,
            "confidence": self.confidence,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())
