"""SQL helpers for the resource tree."""
