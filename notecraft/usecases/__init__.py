from .chat import ChatWithSources
from .image import GenerateImage
from .insights import GenerateInsights

__all__ = ["ChatWithSources", "GenerateImage", "GenerateInsights"]
