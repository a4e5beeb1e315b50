"""
API request/response schemas.
"""
