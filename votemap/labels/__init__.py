"""Per-frame label placement."""
