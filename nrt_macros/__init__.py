"""NRT ruleset macro engine.

Compiles declarative macro definitions plus an uploaded workbook into
Siebel-style DVM ruleset XML documents.
"""

__version__ = "1.0.0"
