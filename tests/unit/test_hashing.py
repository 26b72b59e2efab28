#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for content-addressed diagram naming."""

import hashlib
import hmac
import re

import pytest
from hypothesis import given
from hypothesis import strategies as st

from mdmermaid.hashing import artifact_name, artifact_reference, content_digest

HEX40 = re.compile(r"^[0-9a-f]{40}$")


@pytest.mark.unit
class TestContentDigest:
    """Test the HMAC-SHA1 digest."""

    def test_matches_keyed_sha1(self):
        """Digest is HMAC-SHA1 keyed with the fixed key."""
        source = "graph TD; A-->B"
        expected = hmac.new(b"remark-mermaid", source.encode("utf-8"), hashlib.sha1).hexdigest()
        assert content_digest(source) == expected

    def test_lowercase_hex(self):
        assert HEX40.match(content_digest("sequenceDiagram\n    Alice->>Bob: Hi"))

    def test_different_sources_differ(self):
        assert content_digest("graph TD; A-->B") != content_digest("graph TD; A-->C")

    def test_empty_source(self):
        """Empty source still yields a well-formed digest."""
        assert HEX40.match(content_digest(""))

    def test_unicode_source(self):
        """Non-ASCII source is hashed as UTF-8."""
        source = "graph TD; Ä-->Ω"
        expected = hmac.new(b"remark-mermaid", source.encode("utf-8"), hashlib.sha1).hexdigest()
        assert content_digest(source) == expected

    @given(st.text())
    def test_deterministic(self, source):
        assert content_digest(source) == content_digest(source)
        assert HEX40.match(content_digest(source))


@pytest.mark.unit
class TestArtifactNaming:
    """Test artifact names and references."""

    def test_name_uses_format_extension(self):
        source = "graph LR; X-->Y"
        assert artifact_name(source) == f"{content_digest(source)}.svg"
        assert artifact_name(source, "png") == f"{content_digest(source)}.png"

    def test_reference_without_image_dir(self):
        source = "graph LR; X-->Y"
        assert artifact_reference(source) == artifact_name(source)

    def test_reference_with_image_dir(self):
        source = "graph LR; X-->Y"
        assert artifact_reference(source, "svg", "images") == f"images/{artifact_name(source)}"

    def test_reference_has_no_dot_prefix(self):
        reference = artifact_reference("graph LR; X-->Y", "svg", "./images")
        assert reference.startswith("images/")

    def test_reference_normalizes_backslashes(self):
        reference = artifact_reference("graph LR; X-->Y", "svg", "docs\\images")
        assert reference.startswith("docs/images/")

    @pytest.mark.parametrize("image_dir", [None, "", "."])
    def test_reference_empty_image_dir(self, image_dir):
        source = "pie\n    \"a\": 1"
        assert artifact_reference(source, "svg", image_dir) == artifact_name(source)
