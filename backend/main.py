"""
FastAPI Backend: Protozoa Identity API v1.

Every response is a pure function of (nonce, configuration). The
sqlite cache only memoizes. Hits are served from storage unless
PROTOZOA_VERIFY_CACHE_HITS is set, in which case each hit is
re-assembled and compared before it is served.

Endpoints:
  GET  /health             - liveness + active configuration
  GET  /creatures/{nonce}  - assemble (or load) one creature
  POST /creatures          - same, from a block-data payload
"""
from __future__ import annotations

import os
from typing import Any, Dict, Optional, Union

from dotenv import load_dotenv

env_path = os.path.join(os.path.dirname(__file__), ".env")
if os.path.exists(env_path):
    load_dotenv(env_path)

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from protozoa_kernel.domain_types import DistributionConstants
from protozoa_kernel.engine import IdentityEngine
from protozoa_kernel.errors import IdentityEngineError, InvalidSeedError
from protozoa_generator.assembler import GeneratorInvariantError
from protozoa_generator.pools import DATA_DIR, PoolBank
from protozoa_runtime.cache import DeterminismError, GenerationCache

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

TOTAL_PARTICLES = int(os.environ.get("PROTOZOA_TOTAL_PARTICLES", "500"))
CACHE_PATH = os.environ.get("PROTOZOA_CACHE_PATH", ":memory:")
POOL_DIR = os.environ.get("PROTOZOA_POOL_DIR", str(DATA_DIR))
VERIFY_CACHE_HITS = os.environ.get("PROTOZOA_VERIFY_CACHE_HITS", "0").lower() in ("1", "true", "yes")
FRONTEND_URL = os.environ.get("FRONTEND_URL", "http://localhost:3000")

# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Protozoa Identity API",
    version="1.0.0",
    description="Deterministic creature identity from a block nonce",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[FRONTEND_URL, "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_engine = IdentityEngine(DistributionConstants(total_particles=TOTAL_PARTICLES))
_bank = PoolBank.from_directory(POOL_DIR)
_cache = GenerationCache(CACHE_PATH, _engine, _bank)

# ---------------------------------------------------------------------------
# Request / Response models
# ---------------------------------------------------------------------------


class CreatureRequest(BaseModel):
    nonce: Union[int, str]
    confirmations: int = 0


# ---------------------------------------------------------------------------
# Core helpers
# ---------------------------------------------------------------------------


def _creature_response(nonce: Any, confirmations: Optional[int] = None) -> Dict[str, Any]:
    """Load or assemble the creature and map engine errors to HTTP codes."""
    try:
        creature, creature_hash, cache_hit = _cache.get_or_generate(nonce, verify=VERIFY_CACHE_HITS)
    except InvalidSeedError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except DeterminismError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except (IdentityEngineError, GeneratorInvariantError) as exc:
        raise HTTPException(status_code=500, detail=str(exc))

    response: Dict[str, Any] = {
        "creature_hash": creature_hash,
        "cache_hit": cache_hit,
        "creature": creature,
    }
    if confirmations is not None:
        response["confirmations"] = confirmations
    return response


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.get("/health")
def health():
    constants = _engine.constants
    return {
        "status": "ok",
        "version": "1.0.0",
        "total_particles": constants.total_particles,
        "min_particles_per_group": constants.min_particles_per_group,
        "max_particles_per_group": constants.max_particles_per_group,
        "pool_counts": _bank.counts(),
        "cached_creatures": _cache.count(),
    }


@app.get("/creatures/{nonce}")
def get_creature(nonce: str):
    return _creature_response(nonce)


@app.post("/creatures")
def create_creature(req: CreatureRequest):
    return _creature_response(req.nonce, req.confirmations)
