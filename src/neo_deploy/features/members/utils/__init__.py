"""SQL helpers for role bindings."""
