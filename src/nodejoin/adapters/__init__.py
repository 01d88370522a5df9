"""Concrete implementations of the capability interfaces."""
