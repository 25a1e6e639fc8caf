"""
Eyes - asynchronous TCP connect port scanner.
"""

__version__ = "0.2.0"
