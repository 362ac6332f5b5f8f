"""Item metadata parsed from the 1Password item list."""

import json
from collections.abc import Iterator
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Item:
    """A single 1Password item, titles and identifiers only."""

    title: str
    vault_name: str
    id: str

    @property
    def reference(self) -> str:
        """Secret reference for the item's password field."""
        return f"op://{self.vault_name}/{self.title}/password"

    def fzf_line(self) -> str:
        """Tab-separated record fed to fzf."""
        return f"{self.title}\t{self.vault_name}\t{self.id}"


@dataclass(frozen=True)
class ItemList:
    """Ordered items together with the raw list response they came from."""

    items: tuple[Item, ...]
    payload: bytes
    cached_age: float | None = None  # seconds since the cache was written, None when fetched fresh

    def __iter__(self) -> Iterator[Item]:
        """Iterate over items in list order."""
        return iter(self.items)

    def __len__(self) -> int:
        """Number of items."""
        return len(self.items)


def parse_items(payload: bytes) -> ItemList:
    """Parse an `op item list --format=json` response.

    Raises:
        ValueError: Payload is not a JSON array.

    """
    data = json.loads(payload)  # JSONDecodeError is a ValueError
    if not isinstance(data, list):
        msg = "Item list response is not a JSON array."
        raise ValueError(msg)

    items: list[Item] = []
    for obj in data:
        if not isinstance(obj, dict):
            continue
        vault = obj.get("vault")
        vault_name = vault.get("name", "") if isinstance(vault, dict) else ""
        items.append(Item(title=str(obj.get("title", "")), vault_name=str(vault_name), id=str(obj.get("id", ""))))
    return ItemList(items=tuple(items), payload=payload)
