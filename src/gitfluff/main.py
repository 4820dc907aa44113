"""
Lint service for gitfluff.

Exposes the linting engine over HTTP so CI jobs and bots can check commit
messages without installing the hook. Every request resolves its own
configuration; nothing is shared between requests.
"""

import json
import logging

from fastapi import FastAPI, HTTPException, Request

from . import __version__
from .commit import lint
from .errors import ConfigError
from .rules import CliOverrides, list_presets, resolve

logger = logging.getLogger(__name__)


app = FastAPI(title="gitfluff - commit message linter")


@app.post("/lint")
async def lint_message(request: Request):
    """
    Lint one commit message.

    Body: {"message": str, "preset"?: str, "config"?: {...}, "write"?: bool,
    "overrides"?: {...}}. `config` uses the `.gitfluff.toml` layout.
    """
    try:
        payload = await request.json()
    except json.JSONDecodeError:
        raise HTTPException(status_code=400, detail="Invalid payload")

    if not isinstance(payload, dict) or not isinstance(payload.get("message"), str):
        raise HTTPException(status_code=400, detail="`message` must be a string")

    try:
        overrides = CliOverrides.from_mapping(
            payload.get("overrides") or {}, write=payload.get("write")
        )
        config = resolve(
            preset_name=payload.get("preset"),
            file_config=payload.get("config"),
            cli_overrides=overrides,
        )
    except ConfigError as e:
        logger.warning(f"Rejected lint request: {e}")
        raise HTTPException(status_code=422, detail=str(e))

    verdict = lint(payload["message"], config, comment_char=None)
    logger.info(
        f"Linted message with preset {config.preset_name}: "
        f"{len(verdict.violations)} violation(s)"
    )

    result = verdict.to_dict()
    result["preset"] = config.preset_name
    return result


@app.get("/presets")
async def presets():
    """Available presets"""
    return {
        "presets": [
            {"name": preset.name, "summary": preset.summary, "aliases": list(preset.aliases)}
            for preset in list_presets()
        ]
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "gitfluff",
    }


@app.get("/")
async def root():
    """Root endpoint with service info"""
    return {
        "name": "gitfluff",
        "description": "Commit message linter for Conventional Commits and custom rules",
        "version": __version__,
        "endpoints": ["/lint", "/presets", "/health"],
    }
