"""
Entry point for the VetConnect API.

Usage:
  uvicorn main:app --reload
  python main.py            # honours APP_HOST / APP_PORT
"""

from __future__ import annotations

import os

import uvicorn

from app.main import create_app

app = create_app()


def main() -> None:
    host = os.getenv("APP_HOST", "127.0.0.1")
    port = int(os.getenv("APP_PORT", "8000"))
    uvicorn.run("main:app", host=host, port=port)


if __name__ == "__main__":
    main()
