"""sqlshift command-line interface."""
