"""Business logic services for inkroom."""

from inkroom.services.drawings import DrawingService, is_png_data_url

__all__ = ["DrawingService", "is_png_data_url"]
