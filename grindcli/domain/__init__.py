"""Domain Layer: value objects, models and the interfaces (ports) of grindcli."""
