"""
Boundary layer: relational store, vector index and file storage adapters.
"""
