"""Media generation services: providers, quota, queue, pipeline."""
