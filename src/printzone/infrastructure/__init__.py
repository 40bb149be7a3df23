"""Infrastructure layer — adapters between upstream payloads and the domain."""
