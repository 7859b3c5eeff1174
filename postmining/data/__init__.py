"""
Data loading and corpus utilities.

This subpackage provides:
- functions to load the posts CSV according to config/data.yaml
- the Corpus container (documents plus per-document metadata).
"""
