"""ANSI Pixels example gallery.

Reads a TSV of titled, encoded artworks, renders each one to PNG in parallel
and writes a static HTML page that shows them.
"""
