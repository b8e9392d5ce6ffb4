"""
Services package.

Storage access, action invocation and the dispatch pipeline.
"""

from .storage_client import ObjectStorageClient, StorageClientProtocol, resolve_base_url
from .action_invoker import ActionInvoker, ActionInvokerProtocol
from .pipeline import DispatchPipeline

__all__ = [
    "ObjectStorageClient",
    "StorageClientProtocol",
    "resolve_base_url",
    "ActionInvoker",
    "ActionInvokerProtocol",
    "DispatchPipeline",
]
