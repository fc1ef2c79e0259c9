"""Shared building blocks used by every ration app: error taxonomy and period helpers."""
