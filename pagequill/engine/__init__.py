"""Layout engine: the document host, bounds, fonts and the speculative layout core."""
