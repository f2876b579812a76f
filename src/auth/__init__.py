"""User accounts and bearer-token authentication."""
