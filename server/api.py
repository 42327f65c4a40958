"""FastAPI server exposing the recommendation engine over HTTP."""

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse

from stylist_app.app import StylistApp

stylist_app = StylistApp()
app = FastAPI(title="Outfit Recommender", version="0.1.0")


@app.get("/healthz")
async def healthcheck() -> dict:
    """Lightweight readiness probe."""

    return {
        "status": "ok",
        "service": "outfit-recommender",
        "environment": stylist_app.config.environment or "local",
        "active_sessions": stylist_app.active_sessions(),
    }


@app.post("/recommendations")
def recommend(payload: dict):
    """Return ranked outfits for the posted inventory, profile and context."""

    response = stylist_app.recommend(payload)
    if response.get("status") == "needs_review":
        return JSONResponse(status_code=422, content=response)
    return response


@app.delete("/sessions/{profile_id}")
async def reset_session(profile_id: str) -> dict:
    """Clear the usage ledger kept for ``profile_id``."""

    if not stylist_app.reset_session(profile_id):
        raise HTTPException(status_code=404, detail="no active session")
    return {"status": "ok", "profile_id": profile_id}


def get_app() -> FastAPI:
    """Expose the FastAPI instance for ASGI servers."""

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.api:app", host="0.0.0.0", port=8080, reload=False)
