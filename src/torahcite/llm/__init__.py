"""LLM access: guarded completion calls."""

from torahcite.llm._llm_call import LLMCallResult, guarded_llm_call

__all__ = [
    "LLMCallResult",
    "guarded_llm_call",
]
