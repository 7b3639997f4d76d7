"""Command-line interface for wfs-toolbox."""
