# Vision Data Module
from .knowledge_base import (
    FurnitureCategory,
    ColorName,
    ShapeRule,
    CLASSIFICATION_RULES,
    match_category,
    rgb_to_color_name,
    dominant_color
)

__all__ = [
    'FurnitureCategory',
    'ColorName',
    'ShapeRule',
    'CLASSIFICATION_RULES',
    'match_category',
    'rgb_to_color_name',
    'dominant_color'
]
