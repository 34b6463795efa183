"""Command line interface (grunto [tasks...])."""
