"""Storage package - database access and repositories."""
