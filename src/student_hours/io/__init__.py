"""I/O layer: file discovery connectors and workbook readers."""
