"""Template context: properties, links and instance data."""
