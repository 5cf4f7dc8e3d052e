"""
Data access layer: one repository per model.
"""
