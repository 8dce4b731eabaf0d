"""Infrastructure layer: persistence, logging, and the casbin adapter."""
