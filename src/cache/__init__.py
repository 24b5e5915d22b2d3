# src/cache/__init__.py — v1
