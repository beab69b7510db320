"""Presentation layer for the identity package."""
