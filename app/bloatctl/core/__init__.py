"""Core services: settings, storage, status tracking and batch orchestration."""
