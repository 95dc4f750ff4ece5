"""Category catalog service."""
