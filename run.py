#!/usr/bin/env python3
"""
Ledger API Entry Point

Starts the FastAPI server with the ledger service.
"""

import sys

from ledger_api.api import run_server
from ledger_api.config import get_config


if __name__ == "__main__":
    config = get_config()
    print(f"Ledger API available at: http://{config.api_host}:{config.api_port}")
    print(f"Documentation at: http://{config.api_host}:{config.api_port}/docs")

    try:
        run_server()
    except KeyboardInterrupt:
        print("\nShutting down Ledger API...")
    except Exception as e:
        print(f"Error starting server: {e}")
        sys.exit(1)
