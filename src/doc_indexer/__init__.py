"""
doc_indexer — incremental document indexing for a vector store.

Documents are enumerated from disk, fingerprinted to find what changed
since the previous run, split into bounded chunks with stable ids, and
upserted into the vector index in small paced batches.  A single job
controller guarantees that at most one run is in flight and publishes a
progress snapshot that can be read at any time.
"""

__version__ = "0.1.0"
