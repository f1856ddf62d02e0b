"""Core request handling for Document Q&A.

Upload and query handling, scratch storage and the LLM provider client.
It has ZERO dependency on any web or UI framework.
"""

__version__ = "0.1.0"
