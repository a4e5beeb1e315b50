"""
Prompt for answering a student's question from retrieved study material.

Dependencies: langchain_core
System role: Prompt definition for the answer generator
"""

from langchain_core.prompts import ChatPromptTemplate

SYSTEM_PROMPT = (
    "You are a helpful AI tutor designed to help students learn. "
    "Your knowledge comes from the provided context only. "
    "If the context doesn't contain enough information to fully answer the question, "
    "acknowledge what you know from the context and suggest what additional information "
    "might be needed. Always be encouraging, clear, and explain concepts in a way that's "
    "easy to understand."
)

TUTOR_PROMPT = ChatPromptTemplate.from_messages([
    ("system", SYSTEM_PROMPT),
    ("human", """Context:
{context}

Question: {question}"""),
])
