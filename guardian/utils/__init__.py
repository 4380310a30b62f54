"""
Utility functions
"""
from guardian.utils.logger import setup_logger, get_logger
from guardian.utils.validators import clean_actions, sanitize_input

__all__ = [
    "setup_logger",
    "get_logger",
    "sanitize_input",
    "clean_actions",
]
