"""Product catalog database: models, engines, sessions."""
