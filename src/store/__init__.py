"""Persistence layer.

This module writes playground records as canonical text, binary records
with a sparse index, JSON and XML mirrors, and a relational table.
"""
