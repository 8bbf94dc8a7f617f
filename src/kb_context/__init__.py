"""Relevance ranking and budget packing of knowledge context for LLM prompts."""
