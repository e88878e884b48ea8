from __future__ import annotations

from fastapi import FastAPI, HTTPException, Response

from apps.freezer.settings import CredentialStore
from apps.freezer.state import SessionState
from packages.contracts.errors import CredentialStoreError
from packages.contracts.models import SessionSnapshot, SettingsPayload


def create_app(state: SessionState, credentials: CredentialStore) -> FastAPI:
    """Local control surface: the settings form and a read-only view of the session."""
    app = FastAPI(title="Freeze Frame Control API", version="0.1.0")

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/v1/session", response_model=SessionSnapshot, response_model_by_alias=True)
    def session() -> SessionSnapshot:
        return state.snapshot()

    @app.get("/v1/captures/{capture_id}")
    def capture(capture_id: str) -> Response:
        png = state.captures.resolve(capture_id)
        if png is None:
            raise HTTPException(status_code=404, detail="capture released or unknown")
        return Response(content=png, media_type="image/png")

    @app.get("/v1/settings", response_model=SettingsPayload, response_model_by_alias=True)
    def read_settings() -> SettingsPayload:
        try:
            return SettingsPayload(google_cloud_api_key=credentials.get_api_key())
        except CredentialStoreError as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc

    @app.put("/v1/settings", response_model=SettingsPayload, response_model_by_alias=True)
    def write_settings(req: SettingsPayload) -> SettingsPayload:
        try:
            stored = credentials.set_api_key(req.google_cloud_api_key)
        except CredentialStoreError as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        return SettingsPayload(google_cloud_api_key=stored)

    return app
