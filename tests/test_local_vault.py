"""Tests for LocalVault and vault path helpers."""

import pytest

from wikibridge.vault import LocalVault, VaultError, VaultFile, join_path


class TestJoinPath:
    def test_collapses_dots_and_slashes(self):
        assert join_path("docs/", "./a//b.png") == "docs/a/b.png"

    def test_parent_segments(self):
        assert join_path("docs/guide", "../shared/c.png") == "docs/shared/c.png"

    def test_cannot_climb_above_root(self):
        assert join_path("docs", "../../x.png") == "x.png"

    def test_empty(self):
        assert join_path("", "/") == ""


class TestVaultFile:
    def test_properties(self):
        f = VaultFile(path="docs/Getting Started.md")
        assert f.name == "Getting Started.md"
        assert f.parent == "docs"
        assert f.stem == "Getting Started"

    def test_root_parent_is_empty(self):
        assert VaultFile(path="Note.md").parent == ""


class TestLocalVault:
    def test_rejects_missing_root(self, tmp_path):
        with pytest.raises(ValueError, match="not a directory"):
            LocalVault(tmp_path / "missing")

    def test_get_file(self, local_vault):
        assert local_vault.get_file("docs/Getting Started.md").path == "docs/Getting Started.md"
        assert local_vault.get_file("/docs/./Getting Started.md").path == "docs/Getting Started.md"

    def test_get_file_folder_is_none(self, local_vault):
        assert local_vault.get_file("docs") is None
        assert local_vault.is_folder("docs/attachments")

    def test_list_files_skips_host_config(self, local_vault):
        paths = [f.path for f in local_vault.list_files()]
        assert "docs/Getting Started.md" in paths
        assert "docs/attachments/diagram.png" in paths
        assert not any(p.startswith(".obsidian") for p in paths)

    def test_parent_segments_clamped_to_root(self, local_vault, vault_dir):
        (vault_dir.parent / "secret.txt").write_text("nope")
        assert local_vault.get_file("../secret.txt") is None

    def test_symlink_escape_rejected(self, local_vault, vault_dir):
        secret = vault_dir.parent / "secret.txt"
        secret.write_text("nope")
        (vault_dir / "docs" / "link.txt").symlink_to(secret)
        assert local_vault.get_file("docs/link.txt") is None

    def test_relative(self, local_vault, vault_dir):
        assert local_vault.relative(vault_dir / "docs" / "Getting Started.md") == "docs/Getting Started.md"

    def test_relative_outside_vault(self, local_vault, tmp_path):
        outside = tmp_path / "elsewhere.md"
        outside.write_text("x")
        with pytest.raises(ValueError, match="outside the vault"):
            local_vault.relative(outside)


class TestResolveLink:
    def test_relative_to_source(self, local_vault):
        found = local_vault.resolve_link("screens/Login Screen.PNG", "docs/Getting Started.md")
        assert found.path == "docs/screens/Login Screen.PNG"

    def test_extensionless_note_link(self, local_vault):
        found = local_vault.resolve_link("Getting Started", "Index.md")
        assert found.path == "docs/Getting Started.md"

    def test_basename_match(self, local_vault):
        found = local_vault.resolve_link("diagram.png", "docs/Getting Started.md")
        assert found.path == "docs/attachments/diagram.png"

    def test_same_folder_match_preferred(self, local_vault, vault_dir):
        (vault_dir / "other").mkdir()
        (vault_dir / "other" / "diagram.png").write_bytes(b"x")
        (vault_dir / "a").mkdir()
        (vault_dir / "a" / "diagram.png").write_bytes(b"y")
        found = local_vault.resolve_link("diagram.png", "other/Note.md")
        assert found.path == "other/diagram.png"

    def test_shortest_path_otherwise(self, local_vault, vault_dir):
        (vault_dir / "a").mkdir()
        (vault_dir / "a" / "diagram.png").write_bytes(b"y")
        found = local_vault.resolve_link("diagram.png", "Note.md")
        assert found.path == "a/diagram.png"

    def test_heading_and_alias_ignored(self, local_vault):
        found = local_vault.resolve_link("Getting Started#Intro|alias", "docs/x.md")
        assert found.path == "docs/Getting Started.md"

    def test_unknown(self, local_vault):
        assert local_vault.resolve_link("nothing.png", "docs/x.md") is None


class TestReads:
    @pytest.mark.asyncio
    async def test_read_text(self, local_vault, sample_note):
        file = local_vault.get_file("docs/Getting Started.md")
        assert await local_vault.read_text(file) == sample_note

    @pytest.mark.asyncio
    async def test_read_binary(self, local_vault):
        file = local_vault.get_file("docs/attachments/diagram.png")
        assert await local_vault.read_binary(file) == b"\x89PNG-diagram"

    @pytest.mark.asyncio
    async def test_missing_file_raises_vault_error(self, local_vault):
        with pytest.raises(VaultError, match="Cannot read"):
            await local_vault.read_binary(VaultFile(path="docs/gone.png"))
