"""CloudSift clients — sync and async facades for search and document updates.

Quick start::

    from cloudsift.client import CloudSearchClient
    from cloudsift.config.settings import Mode

    client = CloudSearchClient("my-domain-abc123", mode=Mode.LIVE)
    ids = client.search("fritters")
"""

from cloudsift.client.client import AsyncCloudSearchClient, CloudSearchClient

__all__ = ["AsyncCloudSearchClient", "CloudSearchClient"]
