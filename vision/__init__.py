# Vision - Furniture Detection and Perspective Module
"""
Vision Module

가구 쇼룸 사진을 위한 결정적(deterministic) 이미지 분석 파이프라인

Pipeline Processors:
    1. 엣지 추출 (1_edge_extract.py)
    2. 윤곽선 추적 (2_contour_trace.py)
    3. 형태 기반 가구 분류 (3_object_classify.py)
    4. 직선 피팅 / 소실점 추정 (4_perspective_estimate.py)
    5. 원근 리매핑 (5_perspective_remap.py)

Directory Structure:
    vision/
    ├── pipeline/           # 통합 파이프라인 오케스트레이터
    ├── processors/         # 단계별 모듈
    ├── data/               # Knowledge Base (분류 규칙, 색상 팔레트)
    ├── utils/              # PixelBuffer 어댑터, 이미지 유틸
    ├── types.py            # 데이터 모델
    ├── exceptions.py       # InvalidBuffer, InvalidPerspective
    └── config.py           # 설정

Usage:
    from vision import FurnitureVisionPipeline, PixelBuffer

    pipeline = FurnitureVisionPipeline()
    analysis = pipeline.analyze_image("room.jpg")
    remapped = pipeline.adapt_furniture_perspective(analysis.objects, source, target)
"""

__version__ = "1.0.0"

# 주요 클래스 노출
from .exceptions import VisionError, InvalidBuffer, InvalidPerspective
from .types import (
    Point,
    BoundingBox,
    DetectedObject,
    ObjectType,
    PerspectiveData,
    ImageAnalysis
)
from .utils import PixelBuffer, ImageUtils
from .processors import (
    EdgeExtractor,
    ContourTracer,
    ObjectClassifier,
    PerspectiveEstimator,
    PerspectiveRemapper,
    extract_edges,
    find_contours,
    classify_objects,
    analyze_perspective,
    remap_objects
)
from .pipeline import FurnitureVisionPipeline, PipelineResult

__all__ = [
    # Errors
    'VisionError',
    'InvalidBuffer',
    'InvalidPerspective',
    # Types
    'Point',
    'BoundingBox',
    'DetectedObject',
    'ObjectType',
    'PerspectiveData',
    'ImageAnalysis',
    'PixelBuffer',
    'ImageUtils',
    # Processors
    'EdgeExtractor',
    'ContourTracer',
    'ObjectClassifier',
    'PerspectiveEstimator',
    'PerspectiveRemapper',
    'extract_edges',
    'find_contours',
    'classify_objects',
    'analyze_perspective',
    'remap_objects',
    # Pipeline
    'FurnitureVisionPipeline',
    'PipelineResult'
]
