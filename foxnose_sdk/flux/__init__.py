"""Flux delivery API client."""

from foxnose_sdk.flux.client import FluxClient


__all__ = ["FluxClient"]
