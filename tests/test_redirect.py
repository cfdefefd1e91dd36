"""Tests for graph_merge.merge.redirect."""

import threading

import pytest

from graph_merge.merge.redirect import IdentityRedirect, RedirectConflictError


class TestIdentityRedirect:
    """Test write-once redirection and chain resolution."""

    def test_empty(self):
        """A new redirect map knows nothing."""
        redirect = IdentityRedirect()
        assert len(redirect) == 0
        assert redirect.get("a") is None
        assert redirect.resolve("a") == "a"

    def test_record_and_get(self):
        """Recorded identities map to their replacement."""
        redirect = IdentityRedirect()
        redirect.record("a", "f1")
        assert "a" in redirect
        assert redirect.get("a") == "f1"
        assert redirect.get("b", "b") == "b"

    def test_write_once(self):
        """A second, different replacement is refused and the first kept."""
        redirect = IdentityRedirect()
        redirect.record("a", "f1")
        with pytest.raises(RedirectConflictError):
            redirect.record("a", "f2")
        assert redirect.get("a") == "f1"

    def test_same_record_twice_is_allowed(self):
        """Re-recording the same pair is a no-op."""
        redirect = IdentityRedirect()
        redirect.record("a", "f1")
        redirect.record("a", "f1")
        assert len(redirect) == 1

    def test_resolve_follows_chain(self):
        """A vertex merged twice resolves to the latest survivor."""
        redirect = IdentityRedirect()
        redirect.record("a", "f1")
        redirect.record("b", "f1")
        redirect.record("f1", "f2")
        assert redirect.get("a") == "f1"
        assert redirect.resolve("a") == "f2"
        assert redirect.resolve("b") == "f2"
        assert redirect.resolve("f2") == "f2"

    def test_concurrent_records(self):
        """Concurrent writers on distinct keys all land."""
        redirect = IdentityRedirect()

        def _writer(offset):
            for i in range(200):
                redirect.record((offset, i), f"f{offset}")

        threads = [threading.Thread(target=_writer, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(redirect) == 800
