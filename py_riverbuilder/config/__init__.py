"""
Configuration: run settings and input-file parsing.
"""

from .config import Settings, load_settings
from .input_file import RiverInput, load_input, parse_input_text, parse_numeric

__all__ = ['Settings', 'load_settings', 'RiverInput', 'load_input', 'parse_input_text', 'parse_numeric']
