"""GraphQL module generation pipeline."""
