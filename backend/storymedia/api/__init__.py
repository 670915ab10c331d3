"""HTTP routes for operational tooling."""
