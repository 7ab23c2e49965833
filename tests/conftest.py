"""
pytest configuration for async tests + 합성 이미지 fixture
"""
import numpy as np
import pytest

from vision.utils.image_ops import PixelBuffer


# pytest-asyncio mode 설정
pytest_plugins = ('pytest_asyncio',)


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "asyncio: marks tests as async")


def make_uniform_buffer(width, height, rgb=(128, 128, 128)):
    """단색 RGBA 버퍼"""
    array = np.zeros((height, width, 4), dtype=np.uint8)
    array[:, :, :3] = rgb
    array[:, :, 3] = 255
    return PixelBuffer.from_array(array)


def make_rectangle_buffer(width, height, rect, rect_rgb=(0, 0, 0), background_rgb=(255, 255, 255)):
    """
    배경 위에 축 정렬 사각형 하나가 있는 버퍼

    Args:
        rect: (x, y, w, h) - 사각형이 차지하는 픽셀 범위
    """
    x, y, w, h = rect
    array = np.zeros((height, width, 3), dtype=np.uint8)
    array[:, :] = background_rgb
    array[y:y + h, x:x + w] = rect_rgb
    return PixelBuffer.from_array(array)


@pytest.fixture
def uniform_buffer():
    return make_uniform_buffer(64, 48)


@pytest.fixture
def rectangle_buffer():
    """120x100 흰 배경, (30, 25)에서 시작하는 60x40 검은 사각형"""
    return make_rectangle_buffer(120, 100, (30, 25, 60, 40))
