"""
Server entry point.

Run with:
    python -m banking_ledger
"""

import uvicorn

from banking_ledger.config import get_settings

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "banking_ledger.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
