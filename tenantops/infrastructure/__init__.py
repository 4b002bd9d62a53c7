"""Infrastructure layer: persistence, identity provider, email and security adapters."""
