"""
Checks and generates XML documentation comments of AL source files.

Reports procedures whose '///' documentation is missing a summary, a
parameter or the return value, and parameters documented but absent from
the procedure signature. Generates documentation snippets for objects and
procedures.

Typical usage example:

from al_xml_doc.src import DocumentationAnalyzer, SourceExtractor
"""

__version__ = "0.1.0"
__author__ = "AI Innovation Hub"
