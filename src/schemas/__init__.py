# src/schemas/__init__.py — v1
