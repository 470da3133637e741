"""Normalized storage and catalog registries for website-builder state."""
