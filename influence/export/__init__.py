from .formats import GraphExporter
