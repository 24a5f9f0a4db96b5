import logging

import uvicorn
from fastapi import FastAPI

from gcash_portal.config import settings
from gcash_portal.routers import profile, transaction

logging.basicConfig(level=settings.LOG_LEVEL)

# Tables, policies and grants are applied once with `gcash-setup-db`, not at startup
app = FastAPI(title="GCash Transaction Portal API", debug=settings.DEBUG)

app.include_router(profile.router)
app.include_router(transaction.router)


@app.get("/health")
def health():
    return {"status": "ok"}


def run():
    """Run the API server (uvicorn). Use for `gcash-serve`."""
    uvicorn.run("gcash_portal.main:app", host="127.0.0.1", port=8000)
