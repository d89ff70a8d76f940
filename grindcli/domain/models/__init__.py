"""Domain Models: value objects and dataclasses shared across layers."""
