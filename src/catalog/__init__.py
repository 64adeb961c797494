"""Product catalog: models, persistence and configuration."""
