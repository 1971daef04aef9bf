"""Description and image pipeline components."""
from .describer import DescriptionGenerator, build_fallback_description
from .refiner import DescriptionRefiner
from .image_generator import GeneratedImage, ImageGenerator
from .image_providers import (
    HuggingFaceImageProvider,
    ImageProvider,
    OpenAIImageProvider,
    ProviderResult,
)

__all__ = [
    "DescriptionGenerator",
    "DescriptionRefiner",
    "GeneratedImage",
    "HuggingFaceImageProvider",
    "ImageGenerator",
    "ImageProvider",
    "OpenAIImageProvider",
    "ProviderResult",
    "build_fallback_description",
]
