"""HTTP layer: routes, response schemas and middleware."""
