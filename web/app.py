"""
influence web service - resolve works, build citation graphs.

run:
    uvicorn web.app:app --host 0.0.0.0 --port 3000
    (or: influence serve)

endpoints:
    GET /health                              -> liveness
    GET /resolve?q=...                       -> {id, title, year, cited_by_count}
    GET /graph?workId=...&depth=2&limit=20   -> {meta, nodes, links}
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Depends, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from influence.core.config import InfluenceConfig
from influence.core.errors import BadWorkIdError, WorkNotFoundError, UpstreamError
from influence.core.logs import setup_logging
from influence.graph.builder import GraphBuilder
from influence.providers.base import WorkSource
from influence.providers.openalex import OpenAlexSource
from influence.search.resolver import WorkResolver

config = InfluenceConfig.from_env()
setup_logging(config.log_level)
logger = logging.getLogger("influence.web")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """one shared openalex client per process."""
    source = OpenAlexSource(config.providers)
    app.state.source = source
    logger.info(
        f"[web] ready (openalex: {config.providers.base_url}, "
        f"CORS: {', '.join(config.server.cors_origins)})"
    )

    yield

    await source.close()
    logger.info("[web] shut down")


app = FastAPI(
    title="Influence Engine",
    description="Citation graphs around a single work",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.server.cors_origins,
    allow_methods=["GET"],
    allow_headers=["*"],
)


# models
class ResolvedWork(BaseModel):
    id: str
    title: str
    year: Optional[int] = None
    cited_by_count: int = 0


def get_source(request: Request) -> WorkSource:
    """shared work source; overridden in tests."""
    return request.app.state.source


def error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


# routes
@app.get("/health")
async def health():
    """liveness check."""
    return {"ok": True, "service": "influence-engine-backend"}


@app.get("/resolve")
async def resolve(q: str = "", source: WorkSource = Depends(get_source)):
    """resolve an id, DOI or title to one work."""
    query = q.strip()
    if not query:
        return error(400, "Missing required query param: q")

    try:
        work = await WorkResolver(source).resolve(query)
    except UpstreamError as e:
        logger.warning(f"[web] resolve failed: {e}")
        return error(502, str(e) or "Resolve failed")

    if work is None:
        return error(404, "No matching work found.")

    return ResolvedWork(**work.summary())


@app.get("/graph")
async def graph(
    workId: str = "",
    depth: Optional[str] = None,
    limit: Optional[str] = None,
    source: WorkSource = Depends(get_source)
):
    """build the citation graph around workId."""
    work_id = workId.strip()
    if not work_id:
        return error(400, "Missing required query param: workId")

    builder = GraphBuilder(source, config.expansion)
    try:
        result = await builder.build_graph(work_id, depth, limit)
    except BadWorkIdError as e:
        return error(400, str(e))
    except WorkNotFoundError as e:
        return error(404, str(e))
    except UpstreamError as e:
        logger.warning(f"[web] graph failed for {work_id}: {e}")
        return error(502, str(e) or "Graph request failed")

    return result.to_dict()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=config.server.host, port=config.server.port)
