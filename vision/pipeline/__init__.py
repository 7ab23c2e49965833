"""
Furniture Vision Pipeline

이미지 분석 단계를 통합한 파이프라인:
1~3: 엣지 → 윤곽선 → 객체 분류 (탐지 경로)
4~5: 원근 추정 → 원근 리매핑 (원근 경로)
"""

from .furniture_vision_pipeline import FurnitureVisionPipeline, PipelineResult

__all__ = [
    'FurnitureVisionPipeline',
    'PipelineResult'
]
