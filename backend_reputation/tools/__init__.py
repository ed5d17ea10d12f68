"""Command-line tools: demo snapshot builder and local algorithm runner."""
