"""Infrastructure Layer: Contains concrete implementations and adapters.

Connects the application to the outside world (APIs, databases, file systems,
UI libraries, etc.) by implementing the interfaces defined in the domain layer.
It holds the cache tiers, configuration, logging and console output.
""" 