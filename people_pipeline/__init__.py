"""People analytics pipeline: org hierarchy, salary audit and review rankings."""

__version__ = "0.4.0"
