"""
Student Hours Finder - search folders of hours workbooks for one student.

Walks a tree of monthly Excel reports, finds the rows belonging to a student
code and returns their co-curricular and leadership hours, labelled with the
year and month each workbook represents.
"""

__version__ = "0.1.0"
