"""
Analysis helpers built on top of corpora and document-term matrices.
"""
