"""HTTP layer of the gateway."""
