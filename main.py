"""
Entrypoint for FastAPI application.
Run with: uvicorn main:app --reload
"""
from cityinfo.core.config import settings
from cityinfo.main import app

__all__ = ["app"]

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("cityinfo.main:app", host=settings.host, port=settings.port, reload=False)
