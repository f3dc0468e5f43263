"""Entity indexer — keeps application objects in step with a search domain.

An entity type holds a ``SearchIndexer`` and calls it from its own
create/update/delete hooks::

    class User(Model):
        indexer = SearchIndexer(client, ["name", "email"])

        def after_create(self) -> None:
            self.indexer.add(self)

        def after_update(self) -> None:
            self.indexer.update(self)

        def before_delete(self) -> None:
            self.indexer.remove(self)

    users = User.indexer.find("fritters", lambda ids: User.objects.filter(id__in=ids))

Errors from the index are passed to ``on_error``. The default re-raises, so
a failed index update stops the lifecycle operation. Pass a handler (or
override ``on_error`` in a subclass) to log and carry on instead.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from typing import Any, Generic, TypeVar

from cloudsift.client.client import CloudSearchClient
from cloudsift.exceptions import DocumentUpdateException

logger = logging.getLogger(__name__)

_T = TypeVar("_T")

ErrorHandler = Callable[[DocumentUpdateException], Any]


class SearchIndexer(Generic[_T]):
    """Indexes a fixed projection of an entity's attributes.

    Args:
        client: The client used for every index call.
        fields: Attribute names copied from an entity into the document.
        id_attr: Attribute holding the entity's primary key.
        on_error: Called with a ``DocumentUpdateException`` instead of raising it.
    """

    def __init__(
        self,
        client: CloudSearchClient,
        fields: Sequence[str],
        *,
        id_attr: str = "id",
        on_error: ErrorHandler | None = None,
    ) -> None:
        self.client = client
        self.fields = list(fields)
        self.id_attr = id_attr
        self._error_handler = on_error

    def project(self, entity: Any) -> dict[str, Any]:
        """The document fields submitted for ``entity``."""
        return {name: getattr(entity, name) for name in self.fields}

    def document_id(self, entity: Any) -> Any:
        return getattr(entity, self.id_attr)

    def add(self, entity: Any) -> Any:
        try:
            return self.client.add_item(self.document_id(entity), self.project(entity))
        except DocumentUpdateException as e:
            return self.on_error(e)

    def update(self, entity: Any) -> Any:
        try:
            return self.client.update_item(self.document_id(entity), self.project(entity))
        except DocumentUpdateException as e:
            return self.on_error(e)

    def remove(self, entity: Any) -> Any:
        try:
            return self.client.remove_item(self.document_id(entity))
        except DocumentUpdateException as e:
            return self.on_error(e)

    def on_error(self, exception: DocumentUpdateException) -> Any:
        """Handle a failed index update. Re-raises unless a handler was given."""
        if self._error_handler is None:
            raise exception
        logger.warning("Index update failed: %s", exception)
        return self._error_handler(exception)

    def find(self, term: str, loader: Callable[[list[str]], Iterable[_T]]) -> list[_T]:
        """Search the index and load the matching entities.

        ``loader`` receives the matching ids in ranking order. A
        ``LookupError`` raised by it (e.g. a record vanished since it was
        indexed) yields an empty list.

        Raises:
            SearchException: If the search request fails.
        """
        ids = list(self.client.search(term))
        if not ids:
            return []
        try:
            return list(loader(ids))
        except LookupError:
            logger.info("Indexed records missing for ids %s", ids)
            return []
