"""
Vision Pipeline Processors

이미지 분석 단계별 모듈:
1. 엣지 추출 (그레이스케일 → 블러 → Sobel → NMS → 이중 임계값)
2. 윤곽선 추적 (8-연결 DFS)
3. 형태 기반 객체 분류 + 대표 색상
4. 직선 피팅 및 원근 추정 (소실점, 수평선)
5. 원근 리매핑 (바운딩 박스 변환)
"""

import importlib

# 숫자가 포함된 파일명을 위한 동적 import
_stage1 = importlib.import_module('.1_edge_extract', package='vision.processors')
_stage2 = importlib.import_module('.2_contour_trace', package='vision.processors')
_stage3 = importlib.import_module('.3_object_classify', package='vision.processors')
_stage4 = importlib.import_module('.4_perspective_estimate', package='vision.processors')
_stage5 = importlib.import_module('.5_perspective_remap', package='vision.processors')

# 클래스 노출
EdgeExtractor = _stage1.EdgeExtractor
ContourTracer = _stage2.ContourTracer
ObjectClassifier = _stage3.ObjectClassifier
PerspectiveEstimator = _stage4.PerspectiveEstimator
PerspectiveRemapper = _stage5.PerspectiveRemapper

# 단축 함수 노출
extract_edges = _stage1.extract_edges
find_contours = _stage2.find_contours
classify_objects = _stage3.classify_objects
analyze_perspective = _stage4.analyze_perspective
remap_objects = _stage5.remap_objects

__all__ = [
    # Step 1-3: Detection
    'EdgeExtractor',
    'ContourTracer',
    'ObjectClassifier',
    # Step 4-5: Perspective
    'PerspectiveEstimator',
    'PerspectiveRemapper',
    # Functions
    'extract_edges',
    'find_contours',
    'classify_objects',
    'analyze_perspective',
    'remap_objects'
]
