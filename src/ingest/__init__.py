"""Source ingestion layer.

This module reads delimited source documents into playground records.
It prepares the immutable record sequence for the store layer.
"""
