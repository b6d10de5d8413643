"""Web service for MySetlist."""

import uvicorn
from fastapi import FastAPI

from mysetlist import __version__
from mysetlist.config import Settings
from mysetlist.log import setup_logging
from mysetlist.web.routes import router

app = FastAPI(
    title="MySetlist",
    description="Concert setlist tracking: song search backed by Spotify",
    version=__version__,
)

# Include API routes
app.include_router(router)


def main():
    """Run the web server."""
    settings = Settings.from_env()
    setup_logging(settings.log_level)

    uvicorn.run(
        "mysetlist.web:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
    )


if __name__ == "__main__":
    main()
