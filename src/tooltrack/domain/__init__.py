"""Domain layer: models, errors, events and protocols."""
