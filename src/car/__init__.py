"""Pack files into a single spreadsheet-looking archive and restore them."""
__version__ = "0.1.0"
