"""Infrastructure: cache store, key builders, and remote service adapters."""
