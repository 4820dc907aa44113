#!/usr/bin/env python
"""
Entry point for running the gitfluff lint service.

This script sets up the Python path and runs the FastAPI app with uvicorn.
"""

import sys
import os
from pathlib import Path

# Add src directory to Python path
project_root = Path(__file__).parent
src_path = project_root / "src"
sys.path.insert(0, str(src_path))

from dotenv import load_dotenv
import uvicorn

# Load environment variables
load_dotenv()

# Configure logging before importing application modules
from gitfluff.logging_config import configure_logging
configure_logging()

from gitfluff import __version__
from gitfluff.main import app


def main():
    """Run the gitfluff lint service."""
    host = os.getenv("GITFLUFF_HOST", "127.0.0.1")
    port = int(os.getenv("GITFLUFF_PORT", "8000"))

    print(f"gitfluff {__version__} lint service")
    print(f"Server starting on http://{host}:{port}")
    print(f"API docs available at http://{host}:{port}/docs")
    print(f"Health check: http://{host}:{port}/health\n")

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower()
    )


if __name__ == "__main__":
    main()
