"""Life Intelligence - daily logs, domain scores and cross-domain insights."""

__version__ = "0.1.0"
