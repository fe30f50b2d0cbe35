"""HTTP orchestrator for the protozoa identity engine."""
