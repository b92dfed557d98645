"""
Ranking module for scoring protocols against a query using weighted
term frequency over titles and excerpts.
"""
