"""Pydantic schemas for requests, responses and validation results."""
