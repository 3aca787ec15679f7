"""
mathcoach/main.py
ASGI entry point: uvicorn mathcoach.main:app
"""
import logging
import os

from mathcoach.api.app import create_app

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = create_app()
