import logging
from typing import Any, Literal

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from mlbstats import (
    Config,
    FetchStrategy,
    ScrapeError,
    SessionConnectionError,
    StatsPage,
    TableExtractor,
    TableVariant,
    coerce_nested,
    open_session,
)

logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)


class SnapshotRequest(BaseModel):
    variant: Literal["standard", "expanded"] = "standard"
    fetch: Literal["sequential", "concurrent"] | None = None
    config: dict[str, Any] = Field(default_factory=dict)


class SnapshotResponse(BaseModel):
    variant: str
    columns: list[str]
    rows: list[list[str]]


server = FastAPI()


@server.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@server.post("/snapshot", response_model=SnapshotResponse)
async def snapshot(body: SnapshotRequest) -> SnapshotResponse:
    try:
        cfg: Config = coerce_nested(body.config, Config)
    except ValueError as exc:
        raise HTTPException(422, str(exc)) from None

    # A headed browser would block the server waiting on a window nobody sees
    cfg.headless = True

    variant = TableVariant(body.variant)
    fetch = FetchStrategy(body.fetch) if body.fetch else None

    # One session per request; sessions are never shared between runs
    try:
        async with open_session(cfg) as session:
            page = StatsPage(session)
            await page.dismiss_banner()
            snap = await TableExtractor(page).snapshot_for(variant, fetch)
    except SessionConnectionError as exc:
        logger.exception("snapshot: browser endpoint unavailable")
        raise HTTPException(503, str(exc)) from None
    except ScrapeError as exc:
        logger.exception("snapshot: extraction failed")
        raise HTTPException(502, str(exc)) from None

    return SnapshotResponse(**snap.to_dict())
