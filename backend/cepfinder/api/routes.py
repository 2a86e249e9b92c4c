from __future__ import annotations

from fastapi import APIRouter

from cepfinder.api.v1 import cep

router = APIRouter()
router.include_router(cep.router, prefix="/v1/cep", tags=["cep"])
