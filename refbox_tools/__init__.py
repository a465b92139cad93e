"""Shared library code for the @Work refbox task generator."""
