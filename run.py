"""Development and production server runner for the portal API"""
import os

import uvicorn

from portal.core.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "portal.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", 8000)),
        reload=settings.environment != "production",
        log_level=settings.log_level.lower(),
    )
