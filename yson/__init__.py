"""Streaming JSON writer and low-level readers for big-endian binary input."""

__version__ = "0.1.0"
__all__ = ["binary_reader", "json_writer", "writer_core", "writer_utils"]