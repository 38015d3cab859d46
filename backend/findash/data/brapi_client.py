"""
brapi_client.py — brapi.dev quote API client.

Fetches the quarterly statement modules of a B3 ticker from
GET {BRAPI_BASE_URL}/quote/{ticker}?modules=...&token=...

Failures are raised as MarketDataError subclasses so callers can tell a
transport problem from an HTTP status or an unusable body. Requests are
not retried.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import requests

from findash.core.config import settings
from findash.core.logging import get_logger

logger = get_logger(__name__)


class MarketDataError(RuntimeError):
    """Base class for brapi.dev fetch failures."""


class MarketDataTransportError(MarketDataError):
    """The API could not be reached (DNS, connection, timeout...)."""


class MarketDataHTTPError(MarketDataError):
    """The API answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code


class MarketDataEmptyResponseError(MarketDataError):
    """The API answered 2xx but the body has no usable `results` entry."""


def build_quote_url(ticker: str) -> str:
    base_url = settings.BRAPI_BASE_URL.rstrip("/")
    return f"{base_url}/quote/{ticker.strip().upper()}"


def _quote_params() -> Dict[str, str]:
    params = {"modules": settings.BRAPI_MODULES}
    if settings.BRAPI_TOKEN:
        params["token"] = settings.BRAPI_TOKEN
    else:
        logger.debug("BRAPI_TOKEN is not set; requesting quote without a token")
    return params


def fetch_quote(
    ticker: str,
    session: Optional[requests.Session] = None,
) -> Dict[str, Any]:
    """
    Fetch the raw quote payload for `ticker`.

    Args:
        ticker: B3 ticker symbol (e.g., "ROMI3")
        session: Optional requests.Session (defaults to module-level requests)

    Returns:
        Parsed JSON body, guaranteed to hold a non-empty `results` list

    Raises:
        MarketDataTransportError: network failure or timeout
        MarketDataHTTPError: non-2xx status
        MarketDataEmptyResponseError: body is not JSON or `results` is empty
    """
    url = build_quote_url(ticker)
    http = session or requests

    logger.info(f"Fetching brapi quote for {ticker}")

    try:
        response = http.get(
            url,
            params=_quote_params(),
            timeout=settings.BRAPI_REQUEST_TIMEOUT_SECONDS,
        )
    except requests.exceptions.RequestException as e:
        raise MarketDataTransportError(f"Falha ao acessar a API externa: {e}") from e

    if not 200 <= response.status_code < 300:
        raise MarketDataHTTPError(
            response.status_code,
            f"Erro na API: {response.status_code}",
        )

    try:
        data = response.json()
    except ValueError as e:
        raise MarketDataEmptyResponseError("Resposta da API não é um JSON válido") from e

    if not isinstance(data, dict) or not data.get("results"):
        raise MarketDataEmptyResponseError("Dados não encontrados na API")

    logger.debug(f"Successfully fetched quote payload from {url}")
    return data
