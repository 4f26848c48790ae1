"""
Main entry point for narsil-setup

This allows running the CLI with: python -m narsil_setup
"""
from .cli import main

if __name__ == "__main__":
    main()
