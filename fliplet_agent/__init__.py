"""
Fliplet data assistant - tool-calling agent over the Fliplet REST API
"""

__version__ = "1.0.0"
