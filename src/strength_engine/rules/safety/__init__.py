"""Safety stages: magnitude clamp and readiness cap."""
