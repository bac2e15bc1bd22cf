"""Template-driven PPTX deck assembly from JSON outlines."""

from .api import default_output_path, generate, generate_from_files
from .cli import run_cli
from .cloning import clone_slide, delete_slide, delete_slide_range, next_slide_id
from .errors import DeckGenerationError, OutlineIssue, OutlineValidationError, TemplateContractError
from .generator import TemplateDeckGenerator
from .media import cleanup_unused_media, deduplicate_media
from .outline import Outline
from .selection import TemplatePool
from .text import delete_shape, shape_text, substitute
from .validation import load_outline_file, parse_outline_text, validate_outline

__all__ = [
    "DeckGenerationError",
    "Outline",
    "OutlineIssue",
    "OutlineValidationError",
    "TemplateContractError",
    "TemplateDeckGenerator",
    "TemplatePool",
    "cleanup_unused_media",
    "clone_slide",
    "deduplicate_media",
    "default_output_path",
    "delete_shape",
    "delete_slide",
    "delete_slide_range",
    "generate",
    "generate_from_files",
    "load_outline_file",
    "next_slide_id",
    "parse_outline_text",
    "run_cli",
    "shape_text",
    "substitute",
    "validate_outline",
]
