"""
ThreatLedger dashboard server.
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import FastAPI
import uvicorn

from .__version__ import __version__
from .adapters.http import (
    HttpInboxProvider,
    HttpProofService,
    HttpReputationScorer,
    HttpThreatClassifier,
    HttpWalletProvider,
)
from .api.endpoints import router as dashboard_router
from .session import DashboardSession
from .settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)


def build_session(config: Settings) -> DashboardSession:
    """Wire the HTTP adapters described by ``config`` into a session."""
    return DashboardSession(
        inbox=HttpInboxProvider(
            config.inbox.base_url,
            secret=config.inbox.secret,
            timeout=config.inbox.timeout
        ),
        classifier=HttpThreatClassifier(
            config.classifier.base_url,
            api_key=config.classifier.api_key,
            timeout=config.classifier.timeout
        ),
        proof_service=HttpProofService(
            config.ledger.base_url,
            api_key=config.ledger.api_key,
            timeout=config.ledger.timeout
        ),
        wallet=HttpWalletProvider(
            config.ledger.wallet_url,
            api_key=config.ledger.api_key,
            timeout=config.ledger.timeout
        ),
        scorer=HttpReputationScorer(
            config.reputation.base_url,
            api_key=config.reputation.api_key,
            timeout=config.reputation.timeout
        ),
        failure_policy=config.classification_failure_policy,
        fetch_limit=config.inbox.fetch_limit
    )


def create_app(
    config: Optional[Settings] = None,
    session: Optional[DashboardSession] = None
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Settings to use (defaults to the global settings)
        session: Pre-built session; built from ``config`` when omitted
    """
    config = config or default_settings
    app = FastAPI(title="ThreatLedger Dashboard", version=__version__)
    app.state.settings = config
    app.state.session = session or build_session(config)

    app.include_router(dashboard_router, prefix="/api")
    logger.info("✅ Dashboard API registered")

    @app.get("/health")
    async def health_check():
        """Health check endpoint for monitoring."""
        return {
            "status": "healthy",
            "version": __version__,
            "timestamp": datetime.now().isoformat(),
            "service": "threatledger-dashboard",
            "ledger_network": config.ledger.network
        }

    @app.on_event("shutdown")
    async def shutdown_event():
        """Close collaborator connections."""
        await app.state.session.close()
        logger.info("Dashboard session closed")

    return app


def run(config: Optional[Settings] = None) -> None:
    """Configure logging and start the server."""
    config = config or default_settings
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    app = create_app(config)
    logger.info(f"🌟 Starting ThreatLedger dashboard on http://{config.server.host}:{config.server.port}")
    logger.info(f"🔧 API Docs: http://{config.server.host}:{config.server.port}/docs")
    uvicorn.run(app, host=config.server.host, port=config.server.port, log_level=config.log_level.lower())


if __name__ == "__main__":
    run()
