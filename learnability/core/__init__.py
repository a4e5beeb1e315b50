"""
Core domain layer: ingestion pipeline, retrieval and answer generation.
"""
