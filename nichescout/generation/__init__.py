"""
Export of scored videos and ideas
"""

from .csv_exporter import CSVExporter

__all__ = ['CSVExporter']
