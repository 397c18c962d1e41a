from fastapi import APIRouter

# Settings that may carry credentials are never echoed back.
HIDDEN_SETTINGS = {"DATABASE_URL"}


def create_systems_router(container_env: dict):
    """Create systems router exposing liveness and the non-secret settings in effect."""
    router = APIRouter(prefix="/systems", tags=["System"])

    @router.get("/health")
    def health():
        return {"status": "ok"}

    @router.get("/config")
    def get_config():
        visible = {k: v for k, v in container_env.items() if k not in HIDDEN_SETTINGS}
        return {"environment": {k: None if v is None else str(v) for k, v in visible.items()}}

    return router
