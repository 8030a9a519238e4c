"""
Shared building blocks: configuration, errors, logging and path helpers.
"""
