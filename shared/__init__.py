"""
Shared utilities for the Salesforce opportunity pipeline.

This package provides common functionality for:
- OAuth2 refresh-token authentication
- The pipeline error taxonomy
"""

__version__ = "1.0.0"
