"""
Plotting helpers for term frequencies, word clouds and like counts.
"""
