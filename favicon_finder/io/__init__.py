"""I/O components for downloading and decoding favicons"""

from favicon_finder.io.image_decoder import ImageDecoder, PillowImageDecoder
from favicon_finder.io.image_fetcher import ImageFetcher

__all__ = ["ImageDecoder", "PillowImageDecoder", "ImageFetcher"]
