"""
Furniture Vision Pipeline

전체 이미지 분석 로직을 통합한 파이프라인 오케스트레이터:

[탐지 경로]
1. PixelBuffer → 엣지 추출 (Canny 방식)
2. 엣지 → 윤곽선 (8-연결 DFS)
3. 윤곽선 → 가구 카테고리 + 대표 색상

[원근 경로]
4. 긴 윤곽선 직선 피팅 → 소실점 / 수평선
5. 두 원근 사이 바운딩 박스 리매핑

각 단계는 순수 함수이며 공유 상태가 없으므로,
여러 이미지를 별도 스레드에서 동시에 분석할 수 있습니다.
"""

import asyncio
import logging
import os
import time
import uuid
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

import numpy as np
from PIL import Image

from vision.config import Config
from vision.processors import (
    EdgeExtractor,
    ContourTracer,
    ObjectClassifier,
    PerspectiveEstimator,
    PerspectiveRemapper
)
from vision.types import DetectedObject, ImageAnalysis, PerspectiveData
from vision.utils.image_ops import ImageUtils, PixelBuffer

logger = logging.getLogger(__name__)

ImageInput = Union[str, os.PathLike, Image.Image, np.ndarray, PixelBuffer]


@dataclass
class PipelineResult:
    """파이프라인 실행 결과 (이미지 1장)"""
    image_id: str
    source: Optional[str] = None            # 파일 경로 입력 시 경로
    analysis: Optional[ImageAnalysis] = None
    processing_time_seconds: float = 0.0
    status: str = "pending"
    error: Optional[str] = None


class FurnitureVisionPipeline:
    """
    가구 이미지 분석 통합 파이프라인

    Stages:
        Stage 1: EdgeExtractor - PixelBuffer → 엣지 버퍼
        Stage 2: ContourTracer - 엣지 → 윤곽선
        Stage 3: ObjectClassifier - 윤곽선 → DetectedObject
        Stage 4: PerspectiveEstimator - 소실점 / 수평선 추정
        Stage 5: PerspectiveRemapper - 원근 간 객체 변환
    """

    def __init__(self, max_image_size: Optional[int] = None):
        """
        Args:
            max_image_size: 입력 이미지 긴 변 최대 크기 (None이면 Config.MAX_IMAGE_SIZE)
        """
        self.max_image_size = max_image_size or Config.MAX_IMAGE_SIZE

        # Stage 1-3: 탐지
        self.edge_extractor = EdgeExtractor()
        self.contour_tracer = ContourTracer()
        self.classifier = ObjectClassifier()

        # Stage 4-5: 원근
        self.perspective_estimator = PerspectiveEstimator()
        self.remapper = PerspectiveRemapper()

        logger.info(f"[FurnitureVisionPipeline] Initialized (max_image_size={self.max_image_size})")

    # =========================================================================
    # Stage 1-3: 객체 탐지
    # =========================================================================

    def detect_objects(self, buffer: PixelBuffer) -> List[DetectedObject]:
        """
        Stage 1-3 통합: 이미지에서 가구 후보 객체를 탐지합니다.

        Args:
            buffer: RGBA PixelBuffer

        Returns:
            DetectedObject 리스트
        """
        edges = self.edge_extractor.extract(buffer)
        # 호출마다 새 스크래치 버퍼 (재진입 가능)
        visited = np.zeros(edges.shape, dtype=bool)
        contours = self.contour_tracer.find_contours(edges, visited)
        return self.classifier.classify(contours, buffer)

    # =========================================================================
    # Stage 4-5: 원근
    # =========================================================================

    def analyze_perspective(self, buffer: PixelBuffer) -> PerspectiveData:
        """Stage 4: 이미지 원근 추정"""
        return self.perspective_estimator.analyze(buffer)

    def adapt_furniture_perspective(
        self,
        furniture: List[DetectedObject],
        source_perspective: PerspectiveData,
        target_perspective: PerspectiveData
    ) -> List[DetectedObject]:
        """
        Stage 5: 가구 객체를 새 원근으로 변환합니다.

        Raises:
            InvalidPerspective: 소스 원근의 view_angle == 0 또는 horizon_line == 1
        """
        return self.remapper.remap(furniture, source_perspective, target_perspective)

    # =========================================================================
    # 통합 분석
    # =========================================================================

    def analyze(self, buffer: PixelBuffer) -> ImageAnalysis:
        """탐지 경로 + 원근 경로를 한 번에 실행합니다."""
        objects = self.detect_objects(buffer)
        perspective = self.analyze_perspective(buffer)

        confidence = (
            sum(obj.confidence for obj in objects) / len(objects)
            if objects else 0.0
        )

        logger.info(
            f"[FurnitureVisionPipeline] {buffer.width}x{buffer.height}: "
            f"{len(objects)} objects, {len(perspective.vanishing_points)} vanishing points"
        )
        return ImageAnalysis(objects=objects, perspective=perspective, confidence=confidence)

    def analyze_image(self, image: ImageInput) -> ImageAnalysis:
        """
        경로 / PIL 이미지 / numpy 배열 / PixelBuffer를 분석합니다.
        PIL/경로 입력은 max_image_size 이내로 축소됩니다.
        """
        buffer = ImageUtils.to_pixel_buffer(image, self.max_image_size)
        return self.analyze(buffer)

    def process_single_image(self, image: ImageInput) -> PipelineResult:
        """
        단일 이미지를 처리합니다. 실패해도 예외 대신 failed 결과를 반환합니다.

        Returns:
            PipelineResult
        """
        start_time = time.time()

        result = PipelineResult(
            image_id=str(uuid.uuid4()),
            source=os.fspath(image) if isinstance(image, (str, os.PathLike)) else None,
            status="processing"
        )

        try:
            result.analysis = self.analyze_image(image)
            result.status = "completed"
        except Exception as e:
            result.status = "failed"
            result.error = str(e)
            logger.exception(f"[FurnitureVisionPipeline] Image {result.image_id} failed: {e}")

        result.processing_time_seconds = time.time() - start_time
        return result

    async def process_multiple_images(
        self,
        images: List[ImageInput],
        max_concurrent: Optional[int] = None
    ) -> List[PipelineResult]:
        """
        여러 이미지를 워커 스레드에서 병렬 처리합니다.

        Args:
            images: 분석할 이미지 목록
            max_concurrent: 최대 동시 처리 수 (None이면 Config.MAX_CONCURRENT)

        Returns:
            입력 순서와 같은 PipelineResult 리스트
        """
        if max_concurrent is None:
            max_concurrent = Config.MAX_CONCURRENT

        semaphore = asyncio.Semaphore(max_concurrent)

        async def process_with_limit(image: ImageInput) -> PipelineResult:
            async with semaphore:
                return await asyncio.to_thread(self.process_single_image, image)

        tasks = [process_with_limit(image) for image in images]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        processed_results = []
        for i, r in enumerate(results):
            if isinstance(r, Exception):
                logger.error(f"[FurnitureVisionPipeline] Image #{i} failed: {r}")
                processed_results.append(PipelineResult(
                    image_id=str(uuid.uuid4()),
                    source=os.fspath(images[i]) if isinstance(images[i], (str, os.PathLike)) else None,
                    status="failed",
                    error=str(r)
                ))
            else:
                processed_results.append(r)

        return processed_results

    def to_json_response(self, results: List[PipelineResult]) -> Dict:
        """
        배치 결과를 JSON 응답으로 변환합니다.

        Output format:
        {
            "results": [
                {
                    "image_id": "...",
                    "status": "completed",
                    "objects": [{"id": "obj-0", "name": "Sofa", "boundingBox": {...}, ...}],
                    "perspective": {"vanishingPoints": [...], "horizonLine": 0.5, ...},
                    "error": null
                }
            ]
        }
        """
        results_list = []

        for result in results:
            analysis = result.analysis
            results_list.append({
                "image_id": result.image_id,
                "status": result.status,
                "objects": [obj.to_dict() for obj in analysis.objects] if analysis else [],
                "perspective": analysis.perspective.to_dict() if analysis else None,
                "processing_time_seconds": round(result.processing_time_seconds, 3),
                "error": result.error
            })

        return {"results": results_list}
