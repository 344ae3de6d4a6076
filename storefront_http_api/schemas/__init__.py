"""Pydantic request / response models for the storefront HTTP API."""

from .common import APIModel, MessageResponse, PageMeta

__all__ = ["APIModel", "MessageResponse", "PageMeta"]
