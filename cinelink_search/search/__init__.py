"""Search session state, fallback strategies, orchestration."""
