from .image import (
    ImageRecord,
    validate_image_changes,
    validate_new_image,
)

__all__ = [
    'ImageRecord',
    'validate_image_changes',
    'validate_new_image',
]
