"""Storyforest: personalised illustrated storybooks for children."""

__version__ = "0.1.0"
