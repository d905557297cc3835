"""
asgi.py -- ASGI entry point for StaffDesk.

Run with:  uvicorn asgi:app --reload
           python asgi.py          (binds HOST:PORT from settings)
"""

from api.main import app

__all__ = ["app"]


if __name__ == "__main__":
    import uvicorn

    from core.config import get_settings

    settings = get_settings()
    uvicorn.run("asgi:app", host=settings.host, port=settings.port)
