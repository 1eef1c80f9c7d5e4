"""Retrieval-augmented Q&A over .NET Rocks! podcast transcripts."""

__version__ = "0.1.0"
