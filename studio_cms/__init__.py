"""
Studio CMS: schema-driven content editing for the studio website.
"""

__version__ = "1.0.0"
