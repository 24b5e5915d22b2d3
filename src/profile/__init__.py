# src/profile/__init__.py — v1
