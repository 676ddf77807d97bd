"""Student Hours Finder domain layer.

Domain modules hold the search rules (header classification, row extraction,
aggregation). I/O concerns such as workbook parsing are injected through the
``student_hours.io`` readers.
"""
