from .text import render_report
from .markdown import generate_markdown_report
from .display import display_estimate, display_tag_breakdown

__all__ = [
    "render_report",
    "generate_markdown_report",
    "display_estimate",
    "display_tag_breakdown",
]
