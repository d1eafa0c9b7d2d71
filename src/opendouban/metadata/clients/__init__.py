"""Client implementations for Douban API servers."""

from opendouban.metadata.clients.douban import DoubanApiClient

__all__ = ["DoubanApiClient"]
