"""Admin command-line tools."""
