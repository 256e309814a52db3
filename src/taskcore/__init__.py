"""
TaskCore: a task resource API with schema-driven validation and filtering.
"""

__version__ = "1.0.0"
