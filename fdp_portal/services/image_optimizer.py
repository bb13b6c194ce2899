"""
Image Optimization Service
Normalise uploaded logos: bounded size, metadata stripped, PNG output
"""

from io import BytesIO
from typing import Tuple

from PIL import Image, UnidentifiedImageError


class ImageOptimizer:
    """Resize + strip metadata; logos always come out as PNG"""
    
    MAX_DIMENSION = 1024  # Max width or height of a stored logo
    
    @staticmethod
    def optimize(image_bytes: bytes) -> Tuple[bytes, str]:
        """
        Optimize an uploaded logo
        
        Args:
            image_bytes: Original image bytes
            
        Returns:
            Tuple of (png_bytes, "image/png")
            
        Raises:
            ValueError: If the bytes are not a readable image
        """
        try:
            img = Image.open(BytesIO(image_bytes))
            img.load()
        except (UnidentifiedImageError, OSError) as e:
            raise ValueError(f"Unreadable image: {e}") from e
        
        has_transparency = img.mode in ('RGBA', 'LA') or (img.mode == 'P' and 'transparency' in img.info)
        
        # Keeps aspect ratio
        img.thumbnail((ImageOptimizer.MAX_DIMENSION, ImageOptimizer.MAX_DIMENSION), Image.Resampling.LANCZOS)
        
        if has_transparency:
            if img.mode != 'RGBA':
                img = img.convert('RGBA')
        elif img.mode != 'RGB':
            img = img.convert('RGB')
        
        # EXIF is not copied on save
        output = BytesIO()
        img.save(output, format='PNG', optimize=True)
        return output.getvalue(), "image/png"
    
    @staticmethod
    def get_size_reduction(original_size: int, optimized_size: int) -> str:
        """Get human-readable size reduction"""
        if original_size == 0:
            return "0%"
        reduction = ((original_size - optimized_size) / original_size) * 100
        if reduction > 0:
            return f"-{reduction:.1f}%"
        elif reduction < 0:
            return f"+{abs(reduction):.1f}%"
        return "0%"


# Singleton
image_optimizer = ImageOptimizer()
