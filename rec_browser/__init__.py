"""
Top-level package for the record browser.

This package exposes the core architecture (domain, config, importing, UI).
Most code should import from submodules such as:
    rec_browser.core
    rec_browser.config
    rec_browser.importing
    rec_browser.ui
"""

__all__: list[str] = []
