"""
Top-level package for the social-media posts text-mining walkthrough.

This package contains modules for:
- loading the posts CSV and wrapping it in a corpus
- text preprocessing (casing, stopwords, punctuation, whitespace, stemming)
- document-term matrices with term-frequency and tf-idf weighting
- popularity analysis based on like counts
- plotting (bar charts, word clouds, likes histogram)
- the end-to-end walkthrough runner and shared helpers
"""
