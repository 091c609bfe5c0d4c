"""
pqview: Parquet decoding and normalization for a tabular file viewer.

Packages
- pqview.core: zero-IO contracts (type classes, cell normalization, schema models).
- pqview.io: byte source, decoder, projector, materializer, pipeline, cache, config.
- pqview.host: viewer message protocol and export helpers.
"""

__version__ = "0.1.0"
