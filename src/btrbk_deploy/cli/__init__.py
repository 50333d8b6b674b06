"""Command line interface for btrbk-deploy."""
