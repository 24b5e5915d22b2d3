# src/prompts/__init__.py — v1
