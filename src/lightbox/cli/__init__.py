"""Command line tools for lightbox."""
