"""Package initializer."""
