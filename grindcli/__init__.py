"""grindcli: coding-practice question fetcher with a local two-tier cache."""

__version__ = "1.0.0"
