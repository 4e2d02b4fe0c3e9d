"""Geometry helpers shared by interaction, labels and rendering."""
