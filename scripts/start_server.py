#!/usr/bin/env python3
# =============================================================================
# scripts/start_server.py - API Server Entry Point
# =============================================================================
# Starts the article API with uvicorn on the configured port.
#
# Usage:
#   poetry run python scripts/start_server.py
#
#   # Override settings from the environment
#   SERVER__PORT=9000 LOG__LEVEL=debug poetry run python scripts/start_server.py
#
#   # Use a different config file
#   APP_CONFIG_FILE=/etc/article-api/config.yaml poetry run python scripts/start_server.py
# =============================================================================

import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.main import run


def main():
    """Start the API server."""
    run()


if __name__ == "__main__":
    main()
