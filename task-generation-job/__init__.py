"""Task Generation Job - generate a named arena task and emit it as JSON."""
