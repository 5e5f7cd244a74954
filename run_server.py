#!/usr/bin/env python3
"""Startup script for the KAY Query MCP Server."""

from kay_query.server import main

if __name__ == "__main__":
    main()
