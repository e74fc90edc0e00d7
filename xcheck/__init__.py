"""xcheck — cross-check instrumentation pass"""

__version__ = "0.1.0"
