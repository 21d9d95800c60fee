"""
Nightjar: analyze Adobe Launch implementations.

Fetches a Launch library, extracts its rules, data elements and analytics
variables, and answers questions about them over MCP or the command line.
"""

__version__ = "0.1.0"
