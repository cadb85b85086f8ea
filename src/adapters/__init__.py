"""Storage and output adapters for the postsorter core ports."""
