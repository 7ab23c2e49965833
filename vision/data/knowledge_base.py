"""
Furniture Knowledge Base

형태 기반 가구 분류 규칙 + 색상 팔레트 저장용 정적 DB

- FurnitureCategory / ColorName: 닫힌 라벨 집합 (Enum)
- CLASSIFICATION_RULES: 순서가 있는 결정 리스트 (첫 번째 매칭 우선)
- 헬퍼 함수: 규칙/팔레트 조회
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Tuple


# =============================================================================
# Labels
# =============================================================================

class FurnitureCategory(str, Enum):
    """가구 카테고리 라벨"""
    SOFA = "Sofa"
    TABLE = "Table"
    ROUND_TABLE = "Round Table"
    CABINET = "Cabinet"
    UNKNOWN = "Unknown Object"


class ColorName(str, Enum):
    """대표 색상 팔레트 (정의 순서 = 동률 시 우선순위)"""
    BLACK = "black"
    WHITE = "white"
    RED = "red"
    GREEN = "green"
    BLUE = "blue"
    YELLOW = "yellow"
    PURPLE = "purple"
    CYAN = "cyan"
    GRAY = "gray"


# =============================================================================
# Classification Rules
# =============================================================================

@dataclass(frozen=True)
class ShapeRule:
    """형태 특징 → 카테고리 매핑 규칙"""
    category: FurnitureCategory
    confidence: float
    matches: Callable[[float, float, float], bool]  # (aspect_ratio, area, circularity)


# 평가 순서가 의미를 가짐 (첫 번째 매칭 우선)
CLASSIFICATION_RULES: List[ShapeRule] = [
    ShapeRule(
        category=FurnitureCategory.SOFA,
        confidence=0.8,
        matches=lambda ar, area, circ: ar > 2 and area > 5000,
    ),
    ShapeRule(
        category=FurnitureCategory.TABLE,
        confidence=0.75,
        matches=lambda ar, area, circ: 0.3 < ar < 0.7 and area > 2000,
    ),
    ShapeRule(
        category=FurnitureCategory.ROUND_TABLE,
        confidence=0.7,
        matches=lambda ar, area, circ: circ > 0.7,
    ),
    ShapeRule(
        category=FurnitureCategory.CABINET,
        confidence=0.85,
        matches=lambda ar, area, circ: 0.8 < ar < 1.2 and area > 3000,
    ),
]

FALLBACK_CATEGORY = FurnitureCategory.UNKNOWN
FALLBACK_CONFIDENCE = 0.5


# =============================================================================
# Helper Functions
# =============================================================================

def match_category(aspect_ratio: float, area: float, circularity: float) -> Tuple[FurnitureCategory, float]:
    """
    형태 특징으로 카테고리와 신뢰도를 결정합니다.

    Args:
        aspect_ratio: width / height
        area: 바운딩 박스 면적
        circularity: 4π·area / perimeter²

    Returns:
        (FurnitureCategory, confidence)
    """
    for rule in CLASSIFICATION_RULES:
        if rule.matches(aspect_ratio, area, circularity):
            return rule.category, rule.confidence
    return FALLBACK_CATEGORY, FALLBACK_CONFIDENCE


def rgb_to_color_name(r: int, g: int, b: int) -> ColorName:
    """
    RGB 값을 팔레트 색상으로 분류합니다.

    밝기 → 채널 우세 → 조합 규칙 순서로 판정하며, 어느 것에도
    해당하지 않으면 GRAY.
    """
    r, g, b = int(r), int(g), int(b)
    brightness = (r + g + b) / 3

    if brightness < 50:
        return ColorName.BLACK
    if brightness > 200:
        return ColorName.WHITE

    if r > g and r > b:
        return ColorName.RED
    if g > r and g > b:
        return ColorName.GREEN
    if b > r and b > g:
        return ColorName.BLUE
    if r > 150 and g > 150 and b < 100:
        return ColorName.YELLOW
    if r > 100 and g < 100 and b > 100:
        return ColorName.PURPLE
    if r < 100 and g > 100 and b > 100:
        return ColorName.CYAN

    return ColorName.GRAY


def dominant_color(counts: Dict[ColorName, int]) -> ColorName:
    """
    가장 많이 샘플링된 색상을 반환합니다.
    동률이면 팔레트 정의 순서가 앞선 색상 우선. 샘플이 없으면 GRAY.
    """
    best = ColorName.GRAY
    best_count = 0
    for color in ColorName:
        count = counts.get(color, 0)
        if count > best_count:
            best, best_count = color, count
    return best
