from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.config import get_settings, settings_dict
from shared.log_setup import setup_logging

from .routes import auth, profiles, prompts


description = """
Festivly API.

Brand onboarding and festival post prompts:
1. **auth**: register or sign in; a profile row is created on the way.
2. **profiles**: pick an industry, upload a logo and optionally let AI describe the brand style.
3. **prompts**: turn a festival plus the stored brand context into an image prompt.
"""

_settings = get_settings()
setup_logging(_settings.log_level, json_output=_settings.log_json)

app = FastAPI(
    title="Festivly API",
    description=description,
    version="0.1.0",
    openapi_tags=[
        {"name": "auth", "description": "Authentication"},
        {"name": "profiles", "description": "Brand profiles and onboarding"},
        {"name": "prompts", "description": "Festival prompt generation"},
    ],
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(profiles.router)
app.include_router(prompts.router)


@app.get("/health", tags=["meta"])
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/settings", tags=["meta"])
def settings() -> dict:
    return settings_dict()
