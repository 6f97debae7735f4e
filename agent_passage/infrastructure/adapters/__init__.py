"""Infrastructure adapters implementing application ports."""
