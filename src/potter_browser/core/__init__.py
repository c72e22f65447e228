"""Core data types, key mapping and sort options."""
