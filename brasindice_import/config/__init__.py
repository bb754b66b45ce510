"""YAML configuration for the import CLI."""
