"""Sort orders for the document list."""

from collections.abc import Iterable
from enum import Enum

from ..constants import EXCALIDRAW_SUFFIX
from ..documents import Document


class SortOrder(Enum):
    """How the document list is ordered."""

    NAME_ASC = "name-asc"
    NAME_DESC = "name-desc"
    MODIFIED_DESC = "modified-desc"
    MODIFIED_ASC = "modified-asc"
    CREATED_DESC = "created-desc"
    CREATED_ASC = "created-asc"

    @property
    def label(self) -> str:
        field, direction = self.value.split("-")
        arrow = "↑" if direction == "asc" else "↓"
        return f"{field} {arrow}"

    def next(self) -> "SortOrder":
        """Return the order after this one, wrapping around."""
        orders = list(SortOrder)
        return orders[(orders.index(self) + 1) % len(orders)]

    @classmethod
    def parse(cls, value: str) -> "SortOrder":
        """Look up an order by its value (e.g. "name-asc").

        Raises:
            ValueError: If the value names no known order.
        """
        try:
            return cls(value.strip().lower())
        except ValueError:
            choices = ", ".join(order.value for order in cls)
            raise ValueError(f"Unknown sort order {value!r} (expected one of: {choices})") from None


DEFAULT_SORT = SortOrder.MODIFIED_DESC


def _sort_key(order: SortOrder):
    if order in (SortOrder.NAME_ASC, SortOrder.NAME_DESC):
        return lambda doc: (doc.basename.lower(), doc.path)
    if order in (SortOrder.MODIFIED_ASC, SortOrder.MODIFIED_DESC):
        return lambda doc: (doc.mtime, doc.path)
    return lambda doc: (doc.ctime, doc.path)


def sort_documents(
    documents: Iterable[Document],
    order: SortOrder = DEFAULT_SORT,
    pinned: Iterable[str] = (),
) -> list[Document]:
    """Sort documents, pinned paths first, dropping Excalidraw drawings.

    Args:
        documents: The documents to sort.
        order: The sort order applied within both groups.
        pinned: Vault-relative paths that always come first.

    Returns:
        A new sorted list.
    """
    pinned_paths = set(pinned)
    visible = [doc for doc in documents if not doc.path.endswith(EXCALIDRAW_SUFFIX)]
    reverse = order.value.endswith("-desc")
    key = _sort_key(order)

    head = sorted((doc for doc in visible if doc.path in pinned_paths), key=key, reverse=reverse)
    tail = sorted((doc for doc in visible if doc.path not in pinned_paths), key=key, reverse=reverse)
    return head + tail
