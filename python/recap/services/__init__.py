"""Service layer.

Services hold the logic that route handlers and background jobs call into.
The LLM adapter layer lives in ``recap.services.llm``.
"""
