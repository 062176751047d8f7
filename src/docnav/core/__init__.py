"""Core navigation building blocks."""
