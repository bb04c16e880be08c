"""Generation programs for Storyforest."""

from .storybook_generator import StorybookGenerator

__all__ = ["StorybookGenerator"]
