"""
Object store bindings.

- ObjectStore (base.py): the contract the access layer consumes
- S3ObjectStore (s3.py): boto3-backed binding
- InMemoryObjectStore (memory.py): in-process store for tests and local runs
"""

from s3ds.store.base import ObjectStore
from s3ds.store.memory import InMemoryObjectStore
from s3ds.store.s3 import S3ObjectStore

__all__ = ["InMemoryObjectStore", "ObjectStore", "S3ObjectStore"]
