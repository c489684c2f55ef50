"""Single runs, batch runs and the command line."""
