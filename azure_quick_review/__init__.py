"""Azure Quick Review - compliance scanner for Azure resources"""

__version__ = "1.0.0"
