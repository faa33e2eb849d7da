"""Provider interfaces (abstract base classes).

Every external collaborator is reached through one of these contracts so
concrete backends can be swapped at the composition root (yodo/main.py).
"""

from yodo.interfaces.cache_provider import ICacheProvider
from yodo.interfaces.content_provider import IContentProvider
from yodo.interfaces.llm_provider import ILLMProvider

__all__ = ["ICacheProvider", "IContentProvider", "ILLMProvider"]
