#!/usr/bin/env python3
"""Entry point for `python -m jobtech_mcp`."""

from .cli_main import main

if __name__ == "__main__":
    main()
