"""
Shared utility functions.

This subpackage includes:
- YAML configuration loading
- directory management
- logging helpers used across the project.
"""
