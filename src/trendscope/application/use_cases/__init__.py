from .image_search import ImageSearchUseCase
from .video_search import VideoSearchUseCase

__all__ = ["ImageSearchUseCase", "VideoSearchUseCase"]
