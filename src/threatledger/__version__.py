"""
ThreatLedger Dashboard Version Information
"""

__version__ = "0.1.0"
__version_info__ = (0, 1, 0)
__release_name__ = "Proof Pipeline Edition"

# Version history
VERSION_HISTORY = {
    "0.1.0": {
        "name": "Proof Pipeline Edition",
        "highlights": [
            "Threat statistics over the fetched inbox",
            "Sequential proof submission with per-message error reporting",
            "Classify-once cache shared between statistics and submission",
            "Ledger identity state machine",
            "Sender reputation lookup with trust-level guidance"
        ]
    }
}


def get_version() -> str:
    """Get the current version string."""
    return __version__
