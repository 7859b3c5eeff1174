"""
Text preprocessing and document-term matrix utilities.

This subpackage includes:
- per-document transformations (lowercase, stopword removal, punctuation
  removal, whitespace collapsing, stemming) and the configurable chain
- document-term matrix construction, tf-idf weighting and inspection helpers.
"""
