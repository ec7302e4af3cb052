"""Core failure routing and shared application primitives.

Failure kinds, the dispatch chain and configuration are framework-agnostic;
``middleware`` and ``context`` are where the web layer plugs in.
"""
