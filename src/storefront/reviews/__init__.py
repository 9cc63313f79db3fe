"""Reviews context: product reviews and rating aggregates."""
