#!/usr/bin/env python3
"""Run the KAY Query connection checklist against DATABASE_URL."""

from kay_query.diagnostics import run

if __name__ == "__main__":
    run()
