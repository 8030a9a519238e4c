"""
Initialize the CLI package. Commands live in archive_cli; main_cli is the entry point.
"""
