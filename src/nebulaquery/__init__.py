"""NebulaQuery: space and astronomy Q&A backed by an LLM and NASA's APOD."""

__version__ = "0.1.0"
