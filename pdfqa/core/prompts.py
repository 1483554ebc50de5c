"""Prompt templates and fixed strings used by the QA pipeline."""

FALLBACK_ANSWER = "I could not find the answer in the provided document."

NO_CONTEXT_PLACEHOLDER = "(No relevant context found in the database.)"

CONTEXT_SEPARATOR = "\n\n---\n\n"

REWRITE_PROMPT = """You are a query rewriting assistant.
Given the chat history and the follow-up question, rewrite the follow-up question into a complete, standalone question.
Return only the rewritten question.

Chat History:
{history}

Follow-up Question:
{question}
"""

ANSWER_PROMPT = """You are a helpful Data Structures and Algorithms assistant.
Answer the user's question based ONLY on the provided context.
If the answer cannot be found, say: "{fallback}"

Context:
{context}

User Question:
{question}
"""
