"""
Module entry point for: python -m cpe_parser

Allows running the parser directly as a module:
    python -m cpe_parser parse <pdf_path> [options]
    python -m cpe_parser batch <directory> [options]
    python -m cpe_parser serve [options]
"""

from .cli import cli


def main():
    cli()


if __name__ == "__main__":
    main()
