"""
Pixel Buffer Adapter

디코딩된 이미지를 고정 크기 RGBA 바이트 버퍼로 감싸는 어댑터.
파이프라인의 모든 단계는 PixelBuffer 형태만 입력으로 받습니다.
"""

import os
from dataclasses import dataclass
from typing import Optional, Union

import cv2
import numpy as np
from PIL import Image, ImageOps

from vision.exceptions import InvalidBuffer


@dataclass(frozen=True)
class PixelBuffer:
    """
    RGBA 8bit/채널, row-major 픽셀 버퍼

    생성 후 불변이며 각 단계는 자신의 출력 버퍼를 새로 할당합니다.
    len(data) != width * height * 4 이면 InvalidBuffer 발생.
    """
    width: int
    height: int
    data: bytes

    def __post_init__(self):
        if isinstance(self.width, bool) or not isinstance(self.width, (int, np.integer)):
            raise InvalidBuffer(f"width must be an integer, got {self.width!r}")
        if isinstance(self.height, bool) or not isinstance(self.height, (int, np.integer)):
            raise InvalidBuffer(f"height must be an integer, got {self.height!r}")
        if self.width <= 0 or self.height <= 0:
            raise InvalidBuffer(f"Invalid dimensions: {self.width}x{self.height}")

        if not isinstance(self.data, bytes):
            try:
                object.__setattr__(self, "data", bytes(self.data))
            except TypeError as e:
                raise InvalidBuffer(f"data is not a byte buffer: {e}") from e

        expected = self.width * self.height * 4
        if len(self.data) != expected:
            raise InvalidBuffer(
                f"Buffer length {len(self.data)} does not match "
                f"{self.width}x{self.height}x4 = {expected}"
            )

    def to_array(self) -> np.ndarray:
        """(height, width, 4) uint8 읽기 전용 뷰"""
        return np.frombuffer(self.data, dtype=np.uint8).reshape(self.height, self.width, 4)

    @classmethod
    def from_array(cls, array: np.ndarray) -> "PixelBuffer":
        """
        numpy 배열에서 버퍼를 생성합니다.

        Args:
            array: (H, W) 그레이스케일, (H, W, 3) RGB, (H, W, 4) RGBA uint8 배열
        """
        array = np.asarray(array)
        if array.dtype != np.uint8:
            raise InvalidBuffer(f"Expected uint8 array, got {array.dtype}")

        if array.ndim == 2:
            array = np.stack([array, array, array], axis=-1)
        if array.ndim != 3 or array.shape[2] not in (3, 4):
            raise InvalidBuffer(f"Unsupported array shape: {array.shape}")

        h, w = array.shape[:2]
        if array.shape[2] == 3:
            alpha = np.full((h, w, 1), 255, dtype=np.uint8)
            array = np.concatenate([array, alpha], axis=-1)

        return cls(width=w, height=h, data=np.ascontiguousarray(array).tobytes())

    @classmethod
    def from_pil(cls, pil_image: Image.Image) -> "PixelBuffer":
        rgba = pil_image.convert("RGBA")
        w, h = rgba.size
        return cls(width=w, height=h, data=rgba.tobytes())

    @classmethod
    def from_cv2(cls, cv2_image: np.ndarray) -> "PixelBuffer":
        """OpenCV BGR 이미지에서 버퍼 생성"""
        return cls.from_array(cv2.cvtColor(cv2_image, cv2.COLOR_BGR2RGBA))


class ImageUtils:
    @staticmethod
    def load_image(image_path):
        try:
            original_pil = Image.open(image_path)
            original_pil = ImageOps.exif_transpose(original_pil)
            return original_pil
        except Exception as e:
            raise ValueError(f"Image Load Error: {e}")

    @staticmethod
    def resize_to_fit(pil_image: Image.Image, max_width: int, max_height: int) -> Image.Image:
        """
        비율을 유지하며 (max_width, max_height) 안에 들어오도록 축소합니다.
        이미 작은 이미지는 그대로 반환합니다 (확대 X).
        """
        w, h = pil_image.size
        ratio = min(max_width / w, max_height / h)
        if ratio >= 1:
            return pil_image

        new_size = (max(1, int(w * ratio)), max(1, int(h * ratio)))
        return pil_image.resize(new_size, Image.Resampling.BILINEAR)

    @staticmethod
    def to_pixel_buffer(
        image: Union[str, os.PathLike, Image.Image, np.ndarray, PixelBuffer],
        max_size: Optional[int] = None
    ) -> PixelBuffer:
        """
        경로 / PIL / numpy(RGB, RGBA) / PixelBuffer를 PixelBuffer로 변환합니다.

        Args:
            image: 입력 이미지
            max_size: 긴 변 최대 크기 (PIL/경로 입력에만 적용, None이면 제한 없음)
        """
        if isinstance(image, PixelBuffer):
            return image
        if isinstance(image, np.ndarray):
            return PixelBuffer.from_array(image)

        if isinstance(image, (str, os.PathLike)):
            image = ImageUtils.load_image(image)

        if max_size is not None:
            image = ImageUtils.resize_to_fit(image, max_size, max_size)
        return PixelBuffer.from_pil(image)
