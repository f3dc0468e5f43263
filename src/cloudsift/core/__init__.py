"""Query compilation and request shaping."""
