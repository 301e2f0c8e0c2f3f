"""Adapters layer - concrete implementations of ports.

Inbound adapters parse query text; outbound adapters persist the catalog
and row stores.
"""
