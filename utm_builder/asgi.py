"""
ASGI entry point.

Run with:
    uvicorn utm_builder.asgi:app --reload
"""

from utm_builder.app import create_app

app = create_app()
