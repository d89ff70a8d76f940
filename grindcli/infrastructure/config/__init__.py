"""Configuration loading: YAML file, .env and environment variables."""
