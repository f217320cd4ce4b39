"""
Carpool Rides Backend
=====================
Entry point. Run with: uvicorn main:app --reload
or ``python main.py`` to use HOST / PORT / RELOAD from the environment.
"""

import uvicorn

from src.api.app import create_app
from src.config import settings

app = create_app()

if __name__ == "__main__":
    uvicorn.run("main:app", host=settings.host, port=settings.port, reload=settings.reload)
