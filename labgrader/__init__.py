"""
Lab Grader: Automated Java Lab Report Generation

Unpacks a student's Java lab submission, builds it inside a shared template
project, runs every question against scripted inputs and writes a Markdown
report ready for manual grading.
"""

__version__ = "0.1.0"
