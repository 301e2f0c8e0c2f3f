"""
flatdb - Flat-file SQL-like Data Manager

A minimal single-user data manager: a two-state query tokenizer, a clause
based predicate model, a binary schema catalog and text row stores with
atomic replace for UPDATE and DELETE.
"""

__version__ = "0.1.0"
__author__ = "Systems Engineering Portfolio"
