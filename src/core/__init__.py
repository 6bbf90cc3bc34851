"""Core domain package for playreview.

Core contains rating, extraction, and deduplication logic without any HTTP,
HTML-parser, or storage-specific code, keeping the business logic portable.
"""
