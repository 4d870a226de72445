"""Blog posts written by users."""
