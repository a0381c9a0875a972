"""
FastAPI server exposing channel analysis over HTTP.

POST /api/analyze takes {"channelUrl": ..., "channelId": ...} and returns an
AnalysisResult, or {"error": ...} with a status code from the error taxonomy.
"""

import json
import asyncio
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .config import Configuration
from .workflow import ChannelAnalyzer
from .error_handling import TubeAIError, InputError, status_for_error, message_for_error

logger = logging.getLogger(__name__)


def _error_response(error: BaseException) -> JSONResponse:
    """Translate an exception into a JSON error response."""
    return JSONResponse(
        status_code=status_for_error(error),
        content={"error": message_for_error(error)}
    )


def create_app(config: Optional[Configuration] = None, analyzer: Optional[ChannelAnalyzer] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        config: Configuration instance; loaded from the environment if omitted
        analyzer: Optional pre-built analyzer (collaborators injected for testing)

    Returns:
        FastAPI application
    """
    config = config or (analyzer.config if analyzer else Configuration.load_config())
    analyzer = analyzer or ChannelAnalyzer(config)

    app = FastAPI(title="TubeAI Channel Analysis API")

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.post("/api/analyze")
    async def analyze(request: Request):
        try:
            config.require_youtube_api_key()
            config.require_openai_api_key()

            try:
                body = await request.json()
            except (json.JSONDecodeError, UnicodeDecodeError):
                raise InputError("Invalid JSON in request body")
            if not isinstance(body, dict):
                raise InputError("Request body must be a JSON object")

            result = await analyzer.aanalyze(
                body.get("channelUrl"),
                body.get("channelId"),
                timeout=config.request_timeout
            )

        except TubeAIError as e:
            logger.warning(f"Analysis rejected ({e.status_code}): {e.message}")
            return _error_response(e)
        except asyncio.TimeoutError as e:
            logger.error(f"Analysis timed out after {config.request_timeout}s")
            return _error_response(e)
        except Exception as e:
            logger.error(f"Error in analyze route: {e}", exc_info=True)
            return _error_response(e)

        return JSONResponse(content=result.model_dump(mode="json", by_alias=True))

    return app
