"""Core domain package for postsorter.

Core contains the category catalog, scoring, and batch orchestration without
any storage-specific code, keeping the business logic portable.
"""
