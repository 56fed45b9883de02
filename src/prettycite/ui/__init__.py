"""User interfaces built on top of the prettycite core."""
