"""Provider adapters (search backends, credentials, cache)."""
