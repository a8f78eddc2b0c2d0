"""
app.py — serialis: Serialisable Argumentation Reasoning API

Endpoints:
  GET  /v1/health                     — liveness + supported semantics
  GET  /v1/semantics                  — serialisable and ranking tags
  POST /v1/serialisable/extensions    — extensions of a framework
  POST /v1/serialisable/analysis      — derivation graph + sequences
  POST /v1/serialisable/query         — credulous / sceptical acceptance
  POST /v1/ranking                    — ranks over all subsets
  GET  /v1/audit/queries              — recent query-log entries

Every computation runs in a worker thread under a deadline
(SERIALIS_TIMEOUT_SECONDS). A computation that misses it is reported as
504 and has no result. The worker thread cannot be cancelled: it runs to
completion in the background and keeps its thread-pool slot until then.

Usage:
  uvicorn serialis.app:app --port 8787
  # or: serialis-server
"""

from __future__ import annotations

import asyncio
import logging
import os
import time
from contextlib import asynccontextmanager
from typing import Callable, TypeVar

import anyio.to_thread
import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from serialis import __version__
from serialis.argumentation import (
    SUPPORTED_SEMANTICS,
    ArgumentationFramework,
    ExtensionRankingReasoner,
    FrameworkTooLargeError,
    InvalidFrameworkError,
    RankingSemantics,
    UnsupportedSemanticsError,
    get_analysis_reasoner,
    get_serialisable_reasoner,
    partition_initial_sets,
)
from serialis.models import (
    AnalysisRequest,
    AnalysisResponse,
    ExtensionsRequest,
    ExtensionsResponse,
    FrameworkInput,
    HealthComponent,
    HealthResponse,
    InitialSetsSummary,
    QueryRequest,
    QueryResponse,
    RankingRequest,
    RankingResponse,
    SemanticsListResponse,
)
from serialis.utils.audit import QueryLog, framework_fingerprint

# ── Logging ──────────────────────────────────────────────────────

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s │ %(name)-14s │ %(levelname)-7s │ %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger("serialis.server")

# ── Configuration ────────────────────────────────────────────────

MAX_ARGUMENTS = int(os.environ.get("SERIALIS_MAX_ARGUMENTS", "40"))
MAX_RANKING_ARGUMENTS = int(os.environ.get("SERIALIS_MAX_RANKING_ARGUMENTS", "10"))
# Deadline for the response only; a timed-out worker thread still finishes.
TIMEOUT_SECONDS = float(os.environ.get("SERIALIS_TIMEOUT_SECONDS", "10.0"))
AUDIT_LOG_PATH = os.environ.get("SERIALIS_AUDIT_LOG", "queries.jsonl")
HOST = os.environ.get("SERIALIS_HOST", "0.0.0.0")
PORT = int(os.environ.get("SERIALIS_PORT", "8787"))
SERVER_START_TIME = time.time()

query_log = QueryLog(AUDIT_LOG_PATH)

T = TypeVar("T")


# ── App Lifecycle ────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("=" * 60)
    log.info("  serialis — Serialisable Argumentation Reasoning API")
    log.info(f"  Semantics:   {', '.join(s.value for s in SUPPORTED_SEMANTICS)}")
    log.info(f"  Max args:    {MAX_ARGUMENTS} (ranking: {MAX_RANKING_ARGUMENTS})")
    log.info(f"  Timeout:     {TIMEOUT_SECONDS}s")
    log.info(f"  Query log:   {AUDIT_LOG_PATH}")
    log.info("=" * 60)
    yield
    log.info("serialis server stopped.")


app = FastAPI(
    title="serialis API",
    description="Serialisable extensions, derivation graphs and extension rankings for Dung frameworks.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


# ── Helpers ──────────────────────────────────────────────────────

def _load_framework(spec: FrameworkInput, limit: int) -> ArgumentationFramework:
    try:
        af = spec.to_framework()
    except InvalidFrameworkError as e:
        raise HTTPException(status_code=422, detail=f"Invalid framework: {e}")
    if len(af) > limit:
        raise HTTPException(
            status_code=413,
            detail=str(FrameworkTooLargeError(len(af), limit)),
        )
    return af.freeze()


async def _compute(func: Callable[..., T], *args) -> T:
    try:
        return await asyncio.wait_for(
            anyio.to_thread.run_sync(func, *args, abandon_on_cancel=True),
            timeout=TIMEOUT_SECONDS,
        )
    except asyncio.TimeoutError:
        log.warning(
            f"Computation exceeded {TIMEOUT_SECONDS}s deadline; "
            f"{getattr(func, '__qualname__', func)} is still running in its worker thread"
        )
        raise HTTPException(status_code=504, detail=f"Computation exceeded {TIMEOUT_SECONDS}s")


def _analyse(reasoner, af: ArgumentationFramework):
    return reasoner.get_models_with_analysis(af), partition_initial_sets(af)


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 3)


def _names(extensions) -> list[list[str]]:
    return sorted((ext.names for ext in extensions), key=lambda names: (len(names), names))


# ═════════════════════════════════════════════════════════════════
#  ENDPOINTS
# ═════════════════════════════════════════════════════════════════


# ── System ───────────────────────────────────────────────────────

@app.get("/v1/health", response_model=HealthResponse, tags=["System"])
async def health():
    components = {
        "reasoner": HealthComponent(
            status="ok",
            detail=f"semantics: {', '.join(s.value for s in SUPPORTED_SEMANTICS)}",
        ),
        "query_log": HealthComponent(status="ok", detail=f"logging to {AUDIT_LOG_PATH}"),
    }
    return HealthResponse(
        status="ok",
        version=__version__,
        uptime_seconds=int(time.time() - SERVER_START_TIME),
        components=components,
    )


@app.get("/v1/semantics", response_model=SemanticsListResponse, tags=["System"])
async def list_semantics():
    return SemanticsListResponse(
        serialisable=[s.value for s in SUPPORTED_SEMANTICS],
        ranking=[s.value for s in RankingSemantics],
    )


# ── Serialisable Reasoning ───────────────────────────────────────

@app.post("/v1/serialisable/extensions", response_model=ExtensionsResponse, tags=["Serialisable"])
async def serialisable_extensions(req: ExtensionsRequest):
    try:
        reasoner = get_serialisable_reasoner(req.semantics)
    except UnsupportedSemanticsError as e:
        raise HTTPException(status_code=422, detail=str(e))
    af = _load_framework(req.framework, MAX_ARGUMENTS)

    start = time.perf_counter()
    log.info(f"Extensions | {reasoner.semantics.value} over {len(af)} arguments")
    models = await _compute(reasoner.get_models, af)

    response = ExtensionsResponse(
        semantics=reasoner.semantics.value,
        extensions=_names(models),
        num_extensions=len(models),
        framework_hash=framework_fingerprint(af),
        elapsed_ms=_elapsed_ms(start),
    )
    query_log.log_query(
        request_id=response.request_id,
        operation="extensions",
        semantics=response.semantics,
        framework_hash=response.framework_hash,
        num_arguments=len(af),
        num_attacks=len(af.attacks),
        num_results=response.num_extensions,
        elapsed_ms=response.elapsed_ms,
    )
    return response


@app.post("/v1/serialisable/analysis", response_model=AnalysisResponse, tags=["Serialisable"])
async def serialisable_analysis(req: AnalysisRequest):
    try:
        reasoner = get_analysis_reasoner(req.semantics)
    except UnsupportedSemanticsError as e:
        raise HTTPException(status_code=422, detail=str(e))
    af = _load_framework(req.framework, MAX_ARGUMENTS)

    start = time.perf_counter()
    log.info(f"Analysis | {reasoner.semantics.value} over {len(af)} arguments")
    analysis, partition = await _compute(_analyse, reasoner, af)

    sequences = None
    if req.include_sequences:
        graph = analysis.graph
        sequences = {
            str(state.extension): [
                [initial_set.names for initial_set in seq]
                for seq in graph.serialisation_sequences(state)
            ]
            for state in sorted(graph.accepted_states(), key=lambda s: (len(s.extension), s.extension.names))
        }

    response = AnalysisResponse(
        semantics=reasoner.semantics.value,
        extensions=_names(analysis.extensions),
        initial_sets=InitialSetsSummary(**partition.to_dict()),
        num_states=analysis.graph.number_of_nodes(),
        num_sub_analyses=len(analysis.sub_analyses),
        graph=analysis.graph.to_dict() if req.include_graph else None,
        sequences=sequences,
        framework_hash=framework_fingerprint(af),
        elapsed_ms=_elapsed_ms(start),
    )
    query_log.log_query(
        request_id=response.request_id,
        operation="analysis",
        semantics=response.semantics,
        framework_hash=response.framework_hash,
        num_arguments=len(af),
        num_attacks=len(af.attacks),
        num_results=len(response.extensions),
        elapsed_ms=response.elapsed_ms,
    )
    return response


@app.post("/v1/serialisable/query", response_model=QueryResponse, tags=["Serialisable"])
async def serialisable_query(req: QueryRequest):
    try:
        reasoner = get_serialisable_reasoner(req.semantics)
    except UnsupportedSemanticsError as e:
        raise HTTPException(status_code=422, detail=str(e))
    af = _load_framework(req.framework, MAX_ARGUMENTS)
    if req.argument not in af:
        raise HTTPException(status_code=422, detail=f"Unknown argument: {req.argument}")

    start = time.perf_counter()
    accepted = await _compute(reasoner.query, af, req.argument, req.inference)

    response = QueryResponse(
        semantics=reasoner.semantics.value,
        argument=req.argument,
        inference=req.inference,
        accepted=accepted,
        framework_hash=framework_fingerprint(af),
        elapsed_ms=_elapsed_ms(start),
    )
    query_log.log_query(
        request_id=response.request_id,
        operation=f"query:{req.inference.value}",
        semantics=response.semantics,
        framework_hash=response.framework_hash,
        num_arguments=len(af),
        num_attacks=len(af.attacks),
        num_results=int(accepted),
        elapsed_ms=response.elapsed_ms,
        detail=req.argument,
    )
    return response


# ── Ranking ──────────────────────────────────────────────────────

@app.post("/v1/ranking", response_model=RankingResponse, tags=["Ranking"])
async def ranking(req: RankingRequest):
    try:
        reasoner = ExtensionRankingReasoner(req.semantics, max_arguments=MAX_RANKING_ARGUMENTS)
    except UnsupportedSemanticsError as e:
        raise HTTPException(status_code=422, detail=str(e))
    af = _load_framework(req.framework, MAX_RANKING_ARGUMENTS)

    start = time.perf_counter()
    log.info(f"Ranking | {reasoner.semantics.value} over {len(af)} arguments")
    ranks = await _compute(reasoner.get_models, af)

    response = RankingResponse(
        semantics=reasoner.semantics.value,
        ranks=[_names(rank) for rank in ranks],
        num_ranks=len(ranks),
        framework_hash=framework_fingerprint(af),
        elapsed_ms=_elapsed_ms(start),
    )
    query_log.log_query(
        request_id=response.request_id,
        operation="ranking",
        semantics=response.semantics,
        framework_hash=response.framework_hash,
        num_arguments=len(af),
        num_attacks=len(af.attacks),
        num_results=response.num_ranks,
        elapsed_ms=response.elapsed_ms,
    )
    return response


# ── Query Log ────────────────────────────────────────────────────

@app.get("/v1/audit/queries", tags=["Audit"])
async def list_queries(limit: int = 50):
    entries = query_log.recent(limit=min(limit, 200))
    return {"queries": entries, "total": len(entries)}


# ── Entrypoint ───────────────────────────────────────────────────

def main():
    uvicorn.run(
        "serialis.app:app",
        host=HOST,
        port=PORT,
        log_level="info",
        reload=False,
    )


if __name__ == "__main__":
    main()
