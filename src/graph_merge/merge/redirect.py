"""Identity redirection for vertices retired by a merge."""

import threading

from graph_merge.graph.store import VertexId


class RedirectConflictError(ValueError):
    """A retired vertex already redirects to a different replacement."""


class IdentityRedirect:
    """Map from a retired vertex identity to the vertex that replaced it.

    One instance lives for a single top-level merge call and is shared by
    every rule applied in that call, so an edge processed under a later rule
    reconnects to the vertex an earlier rule produced. Entries are write-once.
    """

    def __init__(self) -> None:
        self._replacements: dict[VertexId, VertexId] = {}
        self._lock = threading.Lock()

    def record(self, original: VertexId, replacement: VertexId) -> None:
        """Record that ``original`` was replaced by ``replacement``.

        Raises:
            RedirectConflictError: If ``original`` already redirects elsewhere
        """
        with self._lock:
            existing = self._replacements.get(original)
            if existing is not None and existing != replacement:
                raise RedirectConflictError(
                    f"Vertex {original!r} already redirects to {existing!r}, "
                    f"refusing to redirect it to {replacement!r}"
                )
            self._replacements[original] = replacement

    def get(self, original: VertexId, default: VertexId | None = None) -> VertexId | None:
        """Direct replacement of ``original``, or ``default``."""
        with self._lock:
            return self._replacements.get(original, default)

    def resolve(self, identity: VertexId) -> VertexId:
        """Follow replacements to the vertex that currently stands for ``identity``."""
        with self._lock:
            seen = {identity}
            current = identity
            while current in self._replacements:
                current = self._replacements[current]
                if current in seen:
                    break
                seen.add(current)
            return current

    def __contains__(self, original: object) -> bool:
        with self._lock:
            return original in self._replacements

    def __len__(self) -> int:
        with self._lock:
            return len(self._replacements)
