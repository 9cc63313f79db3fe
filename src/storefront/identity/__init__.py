"""Identity context: user accounts, credentials and caller identity."""
