"""Command-line jobs run by the scheduler or by hand."""
