"""Command-line interface for paktxt."""
