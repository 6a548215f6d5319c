"""
Asynchronous export.
"""
from .export_worker import ExportWorker

__all__ = ['ExportWorker']
