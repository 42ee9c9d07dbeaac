"""
Unit tests for SQL resource providers.

Tests name-to-path mapping, BOM stripping and not-found handling for the
in-memory, directory and package resource providers.
"""

from pathlib import Path, PurePosixPath

import pytest

from utilitron.data.exceptions import QueryError, QueryNotFoundError
from utilitron.data.resources import (
    DirectoryResourceProvider,
    InMemoryResourceProvider,
    PackageResourceProvider,
    name_to_path,
)

RESOURCES_ROOT = Path(__file__).parent / "resources"
QUERIES = "Utilitron.Tests.Data.RepositoryAncestorQueries"


@pytest.mark.queries
class TestNameToPath:
    """Test dotted name to relative path conversion."""

    def test_dotted_name(self) -> None:
        """Test every dot but the last becomes a separator."""
        assert name_to_path("A.B.CQueries.Query.sql") == PurePosixPath("A/B/CQueries/Query.sql")

    def test_single_segment(self) -> None:
        """Test a name without dots is used as-is."""
        assert name_to_path("Query") == PurePosixPath("Query")

    def test_file_name_only(self) -> None:
        """Test a name with only an extension stays one file."""
        assert name_to_path("Query.sql") == PurePosixPath("Query.sql")


@pytest.mark.queries
class TestInMemoryResourceProvider:
    """Test the in-memory resource provider."""

    def test_get_text(self) -> None:
        """Test text resources are returned unchanged."""
        provider = InMemoryResourceProvider({"A.Q.sql": "select 1"})

        assert provider.get_text("A.Q.sql") == "select 1"

    def test_bytes_are_decoded(self) -> None:
        """Test byte resources are decoded as UTF-8."""
        provider = InMemoryResourceProvider({"A.Q.sql": "select 'ü'".encode()})

        assert provider.get_text("A.Q.sql") == "select 'ü'"

    def test_bom_is_stripped(self) -> None:
        """Test a leading byte-order mark is removed from text and bytes."""
        provider = InMemoryResourceProvider({"A.Text.sql": "\ufeffUTF8BOM", "A.Bytes.sql": b"\xef\xbb\xbfUTF8BOM"})

        assert provider.get_text("A.Text.sql") == "UTF8BOM"
        assert provider.get_text("A.Bytes.sql") == "UTF8BOM"

    def test_missing_resource(self) -> None:
        """Test a missing resource raises QueryNotFoundError."""
        provider = InMemoryResourceProvider()

        with pytest.raises(QueryNotFoundError) as exc_info:
            provider.get_text("A.Missing.sql")

        assert exc_info.value.name == "A.Missing.sql"
        assert "A.Missing.sql" in str(exc_info.value)

    def test_not_found_is_a_lookup_error(self) -> None:
        """Test QueryNotFoundError can be caught as LookupError or QueryError."""
        provider = InMemoryResourceProvider()

        with pytest.raises(LookupError):
            provider.get_text("A.Missing.sql")
        with pytest.raises(QueryError):
            provider.get_text("A.Missing.sql")

    def test_add_and_contains(self) -> None:
        """Test resources can be added after construction."""
        provider = InMemoryResourceProvider()
        provider.add("A.Q.sql", "select 1")

        assert "A.Q.sql" in provider
        assert "A.Other.sql" not in provider


@pytest.mark.queries
class TestDirectoryResourceProvider:
    """Test the directory resource provider."""

    def test_reads_fixture(self) -> None:
        """Test a dotted name is read from the matching file."""
        provider = DirectoryResourceProvider(RESOURCES_ROOT)

        assert provider.get_text(f"{QUERIES}.QueryTest.sql") == "QueryTest"

    def test_bom_is_stripped(self) -> None:
        """Test the UTF-8 BOM fixture reads as plain text."""
        provider = DirectoryResourceProvider(RESOURCES_ROOT)

        result = provider.get_text(f"{QUERIES}.Utf8Bom.sql")

        assert not result.startswith("\ufeff")
        assert result.splitlines()[0] == "UTF8BOM"

    def test_missing_file(self) -> None:
        """Test a missing file raises QueryNotFoundError."""
        provider = DirectoryResourceProvider(RESOURCES_ROOT)

        with pytest.raises(QueryNotFoundError):
            provider.get_text(f"{QUERIES}.Missing.sql")

    def test_contains_unknown_name(self) -> None:
        """Test a name with no matching file is not contained."""
        provider = DirectoryResourceProvider(RESOURCES_ROOT)

        assert "Utilitron.Tests" not in provider

    def test_root_accepts_string(self, tmp_path: Path) -> None:
        """Test the root may be given as a string."""
        (tmp_path / "A").mkdir()
        (tmp_path / "A" / "Q.sql").write_text("select 1", encoding="utf-8")

        provider = DirectoryResourceProvider(str(tmp_path))

        assert provider.root == tmp_path
        assert provider.get_text("A.Q.sql") == "select 1"


@pytest.mark.queries
class TestPackageResourceProvider:
    """Test the package resource provider."""

    def test_reads_package_data(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test resources are read from inside an importable package."""
        package = tmp_path / "bananaqueries"
        queries = package / "Bananas" / "BananaRepositoryQueries"
        queries.mkdir(parents=True)
        (package / "__init__.py").write_text("", encoding="utf-8")
        (queries / "FindRipe.sql").write_bytes(b"\xef\xbb\xbfselect * from Bananas where Ripe = 1")
        monkeypatch.syspath_prepend(str(tmp_path))

        provider = PackageResourceProvider("bananaqueries")

        assert provider.get_text("Bananas.BananaRepositoryQueries.FindRipe.sql") == (
            "select * from Bananas where Ripe = 1"
        )
        with pytest.raises(QueryNotFoundError):
            provider.get_text("Bananas.BananaRepositoryQueries.Missing.sql")
