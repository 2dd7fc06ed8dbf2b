"""
Entry point for running the cascade API with `python -m backend`.
"""
import uvicorn

from backend.settings import get_settings

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "backend.main:app",
        host="0.0.0.0",
        port=8003,
        reload=settings.is_development,
        log_level=settings.log_level.lower(),
    )
