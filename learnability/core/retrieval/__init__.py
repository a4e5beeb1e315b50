"""
Retrieval: scoped filter expressions and the fallback-aware retriever.
"""
