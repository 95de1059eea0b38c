"""Services package - discovery, notification and admin logic."""
