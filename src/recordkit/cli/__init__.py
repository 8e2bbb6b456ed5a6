"""recordkit command line interface."""
