"""Interactive electoral district map viewer."""
