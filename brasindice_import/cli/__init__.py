"""Command line entrypoint (``python -m brasindice_import.cli``)."""
