"""
FOLIO - Portfolio content pipeline

Loads, renders and serves the multilingual blog that backs a personal
portfolio/resume site.

Architecture:
- Content Context: Manifest ingestion, document parsing, rendering and caching
- Locale Context: Current language selection and translation lookup
"""

__version__ = "0.1.0"
