"""Quote printing: cost model, report composition and rendering adapters."""

__version__ = "1.0.0"
