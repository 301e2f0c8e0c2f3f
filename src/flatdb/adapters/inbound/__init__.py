"""Inbound adapters for the data manager.

Inbound adapters turn incoming query text into domain objects.

Exports:
    Tokenizer:
        - QueryTokenizer: Two-state scanner producing a ClauseChain
        - tokenize: Tokenize with the default tokenizer
        - ParseError: Exception for malformed queries
"""

from flatdb.adapters.inbound.tokenizer import QueryTokenizer, tokenize
from flatdb.domain.errors import ParseError

__all__ = [
    "QueryTokenizer",
    "tokenize",
    "ParseError",
]
