"""Tritium beta-decay spectrum, magnetic trap field, primary generation, ntuple output and process streams."""

__version__ = "0.1.0"
__all__ = ["beta", "magnetic_trap", "generator", "process_stream", "output"]