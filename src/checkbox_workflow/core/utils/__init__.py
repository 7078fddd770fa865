"""Small shared helpers (dictionary merging, timestamps)."""
