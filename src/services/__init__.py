"""
Services module
"""
from .report_builder import (
    FormValidationError,
    StatusDisplay,
    build_report_text,
    loss_bar_width,
    parse_estimation_form,
    status_display,
)

__all__ = [
    "FormValidationError",
    "StatusDisplay",
    "build_report_text",
    "loss_bar_width",
    "parse_estimation_form",
    "status_display",
]
