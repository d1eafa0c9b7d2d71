"""Douban metadata models, API client interface and helpers."""
