"""
Inkstamp PDF: overlay text and signature annotations on PDF pages.
"""
__version__ = "0.1.0"
