"""
Grant Portfolio Hub — FastAPI app factory with startup data loading.
"""
from __future__ import annotations

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from granthub.data.store import GrantStore
from granthub.api.dependencies import set_store
from granthub.api.router_meta import router as meta_router
from granthub.api.router_dashboard import router as dashboard_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the grant batch at startup."""
    from granthub.config import DATA_SOURCE
    source = os.environ.get("GRANTHUB_DATA_SOURCE", DATA_SOURCE)
    print(f"  GRANTHUB_DATA_SOURCE = {os.environ.get('GRANTHUB_DATA_SOURCE', '(not set, using published sheet)')}")

    store = GrantStore(source)
    set_store(store)
    store.load()

    if store.error:
        print("\nGrant Portfolio Hub started — data unavailable, POST /api/reload to retry.\n")
    else:
        m = store.baseline.metrics
        print(f"\nGrant Portfolio Hub ready — {m.total_grants:,} grants, "
              f"{m.total_schools} schools, {m.total_sources} sources\n")
    yield


def create_app(load_on_startup: bool = True) -> FastAPI:
    app = FastAPI(
        title="Grant Portfolio Hub API",
        description="Grant portfolio insight — normalized records, metrics, and groupings",
        version="1.0.0",
        lifespan=lifespan if load_on_startup else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(meta_router)
    app.include_router(dashboard_router)

    return app


app = create_app()
