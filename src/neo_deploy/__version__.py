"""Version information for neo-deploy."""

__version__ = "0.1.0"
