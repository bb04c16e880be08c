"""HTTP API for Storyforest."""
