"""Virtual model resolution: chains of model definitions merged into one effective model."""

__version__ = "0.1.0"
