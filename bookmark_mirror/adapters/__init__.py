"""Adapters for external collaborators (bookmark tree, page renderer, storage)."""
