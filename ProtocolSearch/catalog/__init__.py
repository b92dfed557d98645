"""
Catalog module for loading the static protocol index.
"""
