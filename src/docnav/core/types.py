"""Core type definitions."""

from typing import NewType

# Content page path relative to the content root, without extension
# (e.g., "en/ai/tutorial/index"). Distinct from filesystem Path.
PagePath = NewType("PagePath", str)
