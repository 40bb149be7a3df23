"""Domain layer — value types, models, and the pure resolution/geometry core.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
