"""Additional validation utilities for configuration."""

import warnings
from typing import Any, Dict, List


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """Check configuration for settings that are valid but probably unintended.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    matching = config_dict.get("matching") or {}
    if isinstance(matching, dict):
        min_score = matching.get("min_score", 0)
        if isinstance(min_score, (int, float)) and min_score >= 90:
            warning_messages.append(
                f"High matching.min_score ({min_score}) will hide most candidates"
            )

        top_k = matching.get("default_top_k", 10)
        if isinstance(top_k, int) and top_k > 1000:
            warning_messages.append(
                f"Large matching.default_top_k ({top_k}) produces very long listings"
            )

    extraction = config_dict.get("extraction") or {}
    if isinstance(extraction, dict):
        max_bytes = extraction.get("max_text_bytes")
        if isinstance(max_bytes, int) and 0 < max_bytes < 1024:
            warning_messages.append(
                f"Small extraction.max_text_bytes ({max_bytes}) will reject most résumés"
            )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """Emit warning messages using Python's warnings module."""
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
