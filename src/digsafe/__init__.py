"""DigSafe: dig-ticket compliance deadlines and dig-readiness verdicts."""

__version__ = "0.1.0"
