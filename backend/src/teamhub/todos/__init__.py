"""Team todo items."""
