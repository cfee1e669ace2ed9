"""Virtual directory tree package."""
