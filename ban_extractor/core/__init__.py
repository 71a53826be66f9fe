# Path: ban_extractor/core/__init__.py
"""
ban_extractor Core Package

Core utilities for the record extractor.

Submodules:
    - logger: IPO-aware logging system
    - ui: Console progress display
"""
