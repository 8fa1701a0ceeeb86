"""
txfeed - real-time blockchain transaction feed server.
"""

__version__ = "0.1.0"
