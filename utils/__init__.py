# Utility modules for the recipe box
from .image_handler import validate_and_process_image, ImageValidationError
from .sanitizer import sanitize_line, sanitize_multiline, sanitize_ingredient_text
