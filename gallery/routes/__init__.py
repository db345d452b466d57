from .gallery import gallery_bp
from .images import bp as images_bp
from .signature import signature_bp
from .status import status_bp

__all__ = ["gallery_bp", "images_bp", "signature_bp", "status_bp"]
