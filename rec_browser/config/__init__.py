"""
Config package for rec_browser.

Responsible for:
- input spec models (InputSpec, AttributeSpec)
- input spec I/O (load_input_spec)
"""

from .model import AttributeSpec, InputSpec
from .loader import DEFAULT_SPEC_FILE, load_input_spec

__all__ = ["AttributeSpec", "InputSpec", "DEFAULT_SPEC_FILE", "load_input_spec"]
