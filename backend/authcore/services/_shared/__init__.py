"""Shared service-layer building blocks: base service, errors, DTOs and ports."""
