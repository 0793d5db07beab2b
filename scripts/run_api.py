#!/usr/bin/env python
"""
Run the semantic-search API.

Usage:
    python scripts/run_api.py
"""
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import uvicorn

from app.settings import settings


def main():
    uvicorn.run("app.api.main:app", host=settings.api_host, port=settings.api_port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
