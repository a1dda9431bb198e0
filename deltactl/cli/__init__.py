"""deltactl command line interface."""
