"""Recruitment workbench: résumé extraction, candidate parsing and job matching."""

__version__ = "1.0.0"
