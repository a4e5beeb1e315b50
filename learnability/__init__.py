"""
Learnability RAG core.

Per-tenant document ingestion into Milvus and grounded question answering.
"""
