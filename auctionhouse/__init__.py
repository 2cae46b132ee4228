"""Timed product auctions over HTTP, with batched bid ingestion backed by MongoDB."""

__version__ = "0.1.0"