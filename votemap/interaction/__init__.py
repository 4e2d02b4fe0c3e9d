"""Per-frame interaction steps: gestures, keyboard commands, animations."""
