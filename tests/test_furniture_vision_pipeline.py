"""
Tests for vision/pipeline/furniture_vision_pipeline.py

FurnitureVisionPipeline 단위 테스트:
- detect_objects / analyze_perspective / analyze
- adapt_furniture_perspective
- process_single_image 실패 처리
- process_multiple_images (async, 입력 순서 유지)
- to_json_response
"""

import os
import tempfile
from pathlib import Path
from unittest.mock import patch

import numpy as np
import pytest
from PIL import Image

from conftest import make_rectangle_buffer
from vision.exceptions import InvalidPerspective
from vision.pipeline.furniture_vision_pipeline import FurnitureVisionPipeline, PipelineResult
from vision.types import ImageAnalysis, PerspectiveData


@pytest.fixture
def pipeline():
    return FurnitureVisionPipeline()


@pytest.fixture
def large_rectangle_buffer():
    """200x160 흰 배경, (40, 50)에서 시작하는 120x60 검은 사각형"""
    return make_rectangle_buffer(200, 160, (40, 50, 120, 60))


class TestFurnitureVisionPipelineInit:

    def test_default_max_image_size(self, pipeline):
        from vision.config import Config
        assert pipeline.max_image_size == Config.MAX_IMAGE_SIZE

    def test_custom_max_image_size(self):
        assert FurnitureVisionPipeline(max_image_size=256).max_image_size == 256


class TestFurnitureVisionPipelineDetect:
    """detect_objects / analyze 테스트"""

    def test_detect_objects(self, pipeline, large_rectangle_buffer):
        objects = pipeline.detect_objects(large_rectangle_buffer)

        assert len(objects) == 1
        assert objects[0].id == "obj-0"
        assert objects[0].color == "black"

    def test_detect_is_deterministic(self, pipeline, large_rectangle_buffer):
        first = pipeline.detect_objects(large_rectangle_buffer)
        second = pipeline.detect_objects(large_rectangle_buffer)
        assert first == second

    def test_uniform_image_has_no_objects(self, pipeline, uniform_buffer):
        assert pipeline.detect_objects(uniform_buffer) == []

    def test_analyze(self, pipeline, large_rectangle_buffer):
        analysis = pipeline.analyze(large_rectangle_buffer)

        assert isinstance(analysis, ImageAnalysis)
        assert len(analysis.objects) == 1
        assert analysis.confidence == analysis.objects[0].confidence
        assert 0.0 <= analysis.perspective.horizon_line <= 1.0
        assert analysis.room_type == "unknown"

    def test_analyze_empty_confidence(self, pipeline, uniform_buffer):
        analysis = pipeline.analyze(uniform_buffer)

        assert analysis.objects == []
        assert analysis.confidence == 0.0
        assert analysis.perspective == PerspectiveData()

    def test_analyze_image_from_array(self, pipeline):
        array = np.full((100, 120, 3), 255, dtype=np.uint8)
        analysis = pipeline.analyze_image(array)
        assert analysis.objects == []

    def test_analyze_image_downscales_pil(self):
        pipeline = FurnitureVisionPipeline(max_image_size=64)
        with patch.object(pipeline, 'analyze', wraps=pipeline.analyze) as mock_analyze:
            pipeline.analyze_image(Image.new('RGB', (256, 128), color='white'))

        buffer = mock_analyze.call_args[0][0]
        assert (buffer.width, buffer.height) == (64, 32)


class TestFurnitureVisionPipelineAdapt:
    """adapt_furniture_perspective 테스트"""

    def test_adapt(self, pipeline, large_rectangle_buffer):
        objects = pipeline.detect_objects(large_rectangle_buffer)
        source = PerspectiveData(view_angle=60.0, horizon_line=0.5)
        target = PerspectiveData(view_angle=30.0, horizon_line=0.5)

        adapted = pipeline.adapt_furniture_perspective(objects, source, target)

        assert adapted[0].bounding_box.width == pytest.approx(objects[0].bounding_box.width / 2)
        assert adapted[0].bounding_box.height == pytest.approx(objects[0].bounding_box.height)
        assert adapted[0].confidence == pytest.approx(objects[0].confidence * 0.9)

    def test_adapt_invalid_source(self, pipeline):
        with pytest.raises(InvalidPerspective):
            pipeline.adapt_furniture_perspective([], PerspectiveData(view_angle=0.0), PerspectiveData())


class TestFurnitureVisionPipelineProcessSingleImage:
    """process_single_image 테스트"""

    def test_success(self, pipeline, large_rectangle_buffer):
        result = pipeline.process_single_image(large_rectangle_buffer)

        assert result.status == "completed"
        assert result.error is None
        assert result.source is None
        assert len(result.analysis.objects) == 1
        assert result.processing_time_seconds >= 0

    def test_missing_file(self, pipeline):
        result = pipeline.process_single_image("/nonexistent/room.jpg")

        assert result.status == "failed"
        assert result.source == "/nonexistent/room.jpg"
        assert "Image Load Error" in result.error
        assert result.analysis is None

    def test_from_pathlib_path(self, pipeline, tmp_path):
        image_path = tmp_path / "room.png"
        Image.new('RGB', (80, 60), color='white').save(image_path)

        result = pipeline.process_single_image(Path(image_path))

        assert result.status == "completed"
        assert result.source == str(image_path)

    def test_from_path(self, pipeline):
        with tempfile.NamedTemporaryFile(suffix='.png', delete=False) as f:
            Image.new('RGB', (80, 60), color='white').save(f.name)

            try:
                result = pipeline.process_single_image(f.name)
                assert result.status == "completed"
                assert result.source == f.name
            finally:
                os.unlink(f.name)


class TestFurnitureVisionPipelineProcessMultiple:
    """process_multiple_images 테스트"""

    @pytest.mark.asyncio
    async def test_results_keep_input_order(self, pipeline, large_rectangle_buffer, uniform_buffer):
        images = [large_rectangle_buffer, "/nonexistent/room.jpg", uniform_buffer]
        results = await pipeline.process_multiple_images(images, max_concurrent=2)

        assert [r.status for r in results] == ["completed", "failed", "completed"]
        assert len(results[0].analysis.objects) == 1
        assert results[2].analysis.objects == []

    @pytest.mark.asyncio
    async def test_empty_batch(self, pipeline):
        assert await pipeline.process_multiple_images([]) == []

    @pytest.mark.asyncio
    async def test_unexpected_exception_becomes_failed_result(self, pipeline, uniform_buffer):
        with patch.object(pipeline, 'process_single_image', side_effect=RuntimeError("boom")):
            results = await pipeline.process_multiple_images([uniform_buffer])

        assert results[0].status == "failed"
        assert results[0].error == "boom"


class TestFurnitureVisionPipelineToJsonResponse:
    """to_json_response 메서드 테스트"""

    def test_empty_results(self, pipeline):
        assert pipeline.to_json_response([]) == {"results": []}

    def test_completed_result(self, pipeline, large_rectangle_buffer):
        result = pipeline.process_single_image(large_rectangle_buffer)
        json_resp = pipeline.to_json_response([result])

        entry = json_resp["results"][0]
        assert entry["status"] == "completed"
        assert entry["objects"][0]["id"] == "obj-0"
        assert "boundingBox" in entry["objects"][0]
        assert "horizonLine" in entry["perspective"]
        assert entry["error"] is None

    def test_failed_result(self, pipeline):
        result = PipelineResult(image_id="img-1", status="failed", error="Image Load Error: missing")
        entry = pipeline.to_json_response([result])["results"][0]

        assert entry["objects"] == []
        assert entry["perspective"] is None
        assert entry["error"] == "Image Load Error: missing"
