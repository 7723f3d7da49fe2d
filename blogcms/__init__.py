"""Blog CMS backend."""
