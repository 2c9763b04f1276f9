"""LLM adapter module"""

from calltriage.llm.adapter import LLMAdapter, get_llm_adapter

__all__ = ["LLMAdapter", "get_llm_adapter"]
