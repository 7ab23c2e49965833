"""
Tests for vision/processors/1_edge_extract.py

EdgeExtractor 단위 테스트:
- 그레이스케일 / 블러 / 그라디언트 / NMS / 이중 임계값
- 단색 이미지, 경계 픽셀, 멱등성
- 고대비 사각형의 엣지 밴드 위치
"""

import importlib

import numpy as np
import pytest

from conftest import make_rectangle_buffer, make_uniform_buffer
from vision.utils.image_ops import PixelBuffer

# 숫자로 시작하는 모듈은 직접 import
_stage1 = importlib.import_module('.1_edge_extract', package='vision.processors')
EdgeExtractor = _stage1.EdgeExtractor
extract_edges = _stage1.extract_edges


class TestGrayscale:
    """to_grayscale 테스트"""

    def test_weights_and_rounding(self):
        """0.299R + 0.587G + 0.114B, 0.5 올림"""
        array = np.array([[[255, 0, 0], [0, 255, 0], [0, 0, 255], [255, 255, 255]]], dtype=np.uint8)
        gray = EdgeExtractor.to_grayscale(PixelBuffer.from_array(array))

        assert gray.dtype == np.uint8
        assert gray.tolist() == [[76, 150, 29, 255]]

    def test_alpha_ignored(self):
        """알파 채널은 무시"""
        array = np.zeros((1, 1, 4), dtype=np.uint8)
        array[0, 0] = (100, 100, 100, 0)
        gray = EdgeExtractor.to_grayscale(PixelBuffer.from_array(array))
        assert gray[0, 0] == 100


class TestGaussianBlur:
    """gaussian_blur 테스트"""

    def test_border_left_zero(self):
        """경계 1px은 처리하지 않음"""
        gray = np.full((5, 6), 200, dtype=np.uint8)
        blurred = EdgeExtractor().gaussian_blur(gray)

        assert blurred[0, :].sum() == 0
        assert blurred[-1, :].sum() == 0
        assert blurred[:, 0].sum() == 0
        assert blurred[:, -1].sum() == 0
        assert (blurred[1:-1, 1:-1] == 200).all()

    def test_half_values_round_to_even(self):
        """sum/16의 .5 값은 짝수로 반올림 (포화 바이트 저장)"""
        gray = np.zeros((3, 3), dtype=np.uint8)
        gray[1, 1] = 2  # 중심 가중치 4 → 8/16 = 0.5 → 0
        assert EdgeExtractor().gaussian_blur(gray)[1, 1] == 0

        gray[1, 1] = 6  # 24/16 = 1.5 → 2
        assert EdgeExtractor().gaussian_blur(gray)[1, 1] == 2


class TestGradients:
    """calculate_gradients 테스트"""

    def test_flat_image_has_no_gradient(self):
        blurred = np.full((6, 6), 90, dtype=np.uint8)
        magnitude, direction = EdgeExtractor().calculate_gradients(blurred)

        assert magnitude.sum() == 0
        assert direction.dtype == np.float32

    def test_magnitude_saturates(self):
        """크기는 255로 포화"""
        blurred = np.zeros((5, 5), dtype=np.uint8)
        blurred[:, 3:] = 255
        magnitude, _ = EdgeExtractor().calculate_gradients(blurred)

        assert magnitude.max() == 255
        assert magnitude[0, :].sum() == 0

    def test_horizontal_gradient_direction(self):
        """왼쪽 → 오른쪽 밝아지면 방향 0"""
        blurred = np.zeros((5, 5), dtype=np.uint8)
        blurred[:, 3:] = 10
        _, direction = EdgeExtractor().calculate_gradients(blurred)
        assert direction[2, 2] == pytest.approx(0.0)


class TestNonMaximumSuppression:
    """non_maximum_suppression 테스트"""

    def test_keeps_ridge_only(self):
        """수평 방향 구간에서 좌우 이웃보다 작은 픽셀 제거"""
        magnitude = np.zeros((3, 5), dtype=np.uint8)
        magnitude[1] = [0, 100, 200, 100, 0]
        direction = np.zeros((3, 5), dtype=np.float32)

        suppressed = EdgeExtractor.non_maximum_suppression(magnitude, direction)
        assert suppressed[1].tolist() == [0, 0, 200, 0, 0]

    def test_equal_neighbors_kept(self):
        """이웃과 같으면 유지 (>=)"""
        magnitude = np.zeros((3, 5), dtype=np.uint8)
        magnitude[1] = [0, 150, 150, 150, 0]
        direction = np.zeros((3, 5), dtype=np.float32)

        suppressed = EdgeExtractor.non_maximum_suppression(magnitude, direction)
        assert suppressed[1, 2] == 150

    def test_vertical_bucket(self):
        """π/2 방향은 위/아래 이웃과 비교"""
        magnitude = np.zeros((5, 3), dtype=np.uint8)
        magnitude[:, 1] = [0, 100, 200, 100, 0]
        direction = np.full((5, 3), np.pi / 2, dtype=np.float32)

        suppressed = EdgeExtractor.non_maximum_suppression(magnitude, direction)
        assert suppressed[:, 1].tolist() == [0, 0, 200, 0, 0]


class TestDoubleThreshold:
    """double_threshold 테스트"""

    def test_threshold_levels(self):
        suppressed = np.array([[0, 49, 50, 149, 150, 255]], dtype=np.uint8)
        edges = EdgeExtractor.double_threshold(suppressed)
        assert edges.tolist() == [[0, 0, 128, 128, 255, 255]]


class TestExtractEdges:
    """전체 extract 테스트"""

    def test_uniform_image_has_no_edges(self, uniform_buffer):
        """단색 이미지 → 모든 값 0"""
        edges = extract_edges(uniform_buffer)

        assert edges.shape == (uniform_buffer.height, uniform_buffer.width)
        assert edges.dtype == np.uint8
        assert not edges.any()

    @pytest.mark.parametrize("rgb", [(0, 0, 0), (255, 255, 255), (12, 200, 77)])
    def test_uniform_colors(self, rgb):
        assert not extract_edges(make_uniform_buffer(20, 15, rgb)).any()

    def test_tiny_image(self):
        """내부 픽셀이 없는 이미지"""
        edges = extract_edges(make_uniform_buffer(2, 2))
        assert edges.shape == (2, 2)
        assert not edges.any()

    def test_output_values(self, rectangle_buffer):
        edges = extract_edges(rectangle_buffer)
        assert set(np.unique(edges).tolist()) <= {0, 128, 255}

    def test_border_always_zero(self):
        """이미지 가장자리에 걸친 사각형도 경계 픽셀은 0"""
        buffer = make_rectangle_buffer(40, 30, (0, 0, 20, 15))
        edges = extract_edges(buffer)

        assert not edges[0, :].any()
        assert not edges[-1, :].any()
        assert not edges[:, 0].any()
        assert not edges[:, -1].any()

    def test_idempotent(self, rectangle_buffer):
        """같은 버퍼 두 번 → 바이트 단위 동일"""
        first = extract_edges(rectangle_buffer)
        second = extract_edges(rectangle_buffer)

        assert first.tobytes() == second.tobytes()

    def test_input_not_mutated(self, rectangle_buffer):
        before = rectangle_buffer.data
        EdgeExtractor().extract(rectangle_buffer)
        assert rectangle_buffer.data == before

    def test_rectangle_edge_bands(self, rectangle_buffer):
        """
        흰 배경 위 검은 사각형 (x=30..89, y=25..64):
        블러 + Sobel 확산으로 좌/우 변에 4px 폭의 강한 엣지 밴드
        """
        edges = extract_edges(rectangle_buffer)
        row = 45

        assert edges[row, 27:33].tolist() == [0, 255, 255, 255, 255, 0]
        assert edges[row, 87:93].tolist() == [0, 255, 255, 255, 255, 0]
        # 사각형 내부는 엣지 없음
        assert not edges[30:60, 35:85].any()
