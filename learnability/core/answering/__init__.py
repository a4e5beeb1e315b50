"""
Answer synthesis from retrieved passages.
"""
