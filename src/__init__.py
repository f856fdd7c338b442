"""postmeta - front matter schema and validation for Markdown blog posts."""

__version__ = "0.1.0"
