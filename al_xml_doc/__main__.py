"""
Main entry point for running al_xml_doc as a module.

This allows the package to be run with: python -m al_xml_doc
"""

from .src.cli import main

if __name__ == '__main__':
    main()
