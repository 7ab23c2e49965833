# Vision Utils Module
from .image_ops import PixelBuffer, ImageUtils

__all__ = ['PixelBuffer', 'ImageUtils']
