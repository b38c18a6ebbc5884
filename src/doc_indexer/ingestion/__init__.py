"""
Ingestion — reading, change detection, normalization and chunking.

These stages turn the files on disk into identified chunks ready to be
committed to the vector store.  Each stage is usable on its own; the
:mod:`doc_indexer.indexing` package composes them into a run.
"""
