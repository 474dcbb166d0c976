"""
Unit tests for the Target lifecycle.

Tests presence probing, source selection, build and install steps with
mocked subprocesses, plus an end-to-end mirror acquisition.
"""

import hashlib
import sys
from pathlib import Path
from unittest.mock import Mock, patch

import pytest
import responses

from forgekit.config.parser import TargetConfig
from forgekit.core.exceptions import (
    BuildError,
    ChecksumError,
    CommandError,
    ConflictingSourceError,
    InstallError,
    MissingSourceError,
    ProbeError,
    TargetConfigurationError,
)
from forgekit.targets.base import Buildable
from forgekit.targets.target import MirrorSource, RepoSource, Target


def _ok(*args, **kwargs):
    return Mock(returncode=0, stdout="", stderr="")


# =============================================================================
# Construction
# =============================================================================


class TestTargetInit:
    """Test Target construction."""

    def test_is_buildable(self, target_config):
        """Test Target implements the lifecycle contract."""
        target = Target(target_config())

        assert isinstance(target, Buildable)
        assert target.name() == "foo"
        assert repr(target) == "<Target foo>"

    def test_requires_config(self):
        """Test a non-TargetConfig argument is rejected."""
        with pytest.raises(TypeError, match="must be TargetConfig"):
            Target({"name": "foo"})


# =============================================================================
# Presence
# =============================================================================


class TestIsPresent:
    """Test is_present probing."""

    def test_missing_executable_is_absent(self, target_config):
        """Test an executable that can't be spawned means absent."""
        target = Target(target_config(name="forgekit-no-such-tool-xyz"))

        assert target.is_present() is False

    def test_permission_error_is_absent(self, target_config):
        """Test any spawn failure means absent."""
        target = Target(target_config())

        with patch("subprocess.run", side_effect=PermissionError("denied")):
            assert target.is_present() is False

    def test_matching_version(self, target_config):
        """Test a real executable reporting the required version."""
        version = f"{sys.version_info.major}.{sys.version_info.minor}"
        target = Target(target_config(name=sys.executable, version=version))

        assert target.is_present() is True

    def test_outdated_version(self, target_config):
        """Test a different version means absent."""
        target = Target(target_config())

        with patch("subprocess.run") as mock_run:
            mock_run.return_value = Mock(returncode=0, stdout=b"foo 1.9\n")
            assert target.is_present() is False

        assert mock_run.call_args.args[0] == ["foo", "--version"]

    def test_only_first_line_considered(self, target_config):
        """Test versions appearing after the first line are ignored."""
        target = Target(target_config())

        with patch("subprocess.run") as mock_run:
            mock_run.return_value = Mock(
                returncode=0, stdout=b"foo 1.9\nbuilt against bar 2.0\n"
            )
            assert target.is_present() is False

    def test_banner_containing_version(self, target_config):
        """Test a version embedded in a banner line counts as present."""
        target = Target(target_config())

        with patch("subprocess.run") as mock_run:
            mock_run.return_value = Mock(returncode=0, stdout=b"GNU foo 2.0.1\n")
            assert target.is_present() is True

    def test_garbage_output_raises(self, target_config):
        """Test undecodable output from a present tool is an error."""
        target = Target(target_config())

        with patch("subprocess.run") as mock_run:
            mock_run.return_value = Mock(returncode=0, stdout=b"\xff\xfe\x00")
            with pytest.raises(ProbeError):
                target.is_present()


# =============================================================================
# Source selection / download
# =============================================================================


class TestSource:
    """Test mirror/repo exclusivity."""

    def test_mirror(self, target_config):
        """Test a mirror-only target resolves to MirrorSource."""
        target = Target(target_config())

        assert target.source == MirrorSource("https://example.com/foo-{version}.tar.gz")

    def test_repo(self, target_config):
        """Test a repo-only target resolves to RepoSource."""
        target = Target(target_config(mirror=None, repo="https://example.com/foo.git"))

        assert target.source == RepoSource("https://example.com/foo.git")

    def test_both_set(self, target_config):
        """Test both sources set raises ConflictingSourceError on download."""
        target = Target(target_config(repo="https://example.com/foo.git"))

        with pytest.raises(ConflictingSourceError, match="use only one"):
            target.download()

    def test_neither_set(self, target_config):
        """Test no source raises MissingSourceError on download."""
        target = Target(target_config(mirror=None))

        with pytest.raises(MissingSourceError, match="at least one"):
            target.download()

    def test_errors_are_distinguishable(self, target_config):
        """Test both error cases share a base but differ in type."""
        both = Target(target_config(repo="r"))
        neither = Target(target_config(mirror=None))

        with pytest.raises(TargetConfigurationError) as both_info:
            both.download()
        with pytest.raises(TargetConfigurationError) as neither_info:
            neither.download()

        assert type(both_info.value) is not type(neither_info.value)
        assert both_info.value.target_name == "foo"

    def test_construction_does_not_validate_sources(self, target_config):
        """Test misconfigured sources are only reported at download time."""
        Target(target_config(mirror=None))

    def test_mirror_download_delegates(self, target_config):
        """Test mirror targets use the archive acquirer."""
        target = Target(target_config())

        with patch("forgekit.targets.target.download_from_mirror") as mock_download:
            target.download()

        mock_download.assert_called_once_with(
            "https://example.com/foo-{version}.tar.gz", "2.0", expected_sha256=None
        )

    def test_repo_download_delegates(self, target_config):
        """Test repo targets use the repository acquirer."""
        target = Target(target_config(mirror=None, repo="https://example.com/foo.git"))

        with patch("forgekit.targets.target.checkout_repository") as mock_checkout:
            target.download()

        mock_checkout.assert_called_once_with("https://example.com/foo.git", "2.0")


# =============================================================================
# Build
# =============================================================================


class TestBuild:
    """Test build step."""

    @pytest.fixture
    def source_tree(self, workdir) -> Path:
        """Create an already-acquired source tree."""
        tree = workdir / "archive"
        tree.mkdir()
        return tree

    def test_configure_then_make(self, target_config, source_tree, workdir):
        """Test configure runs before the build command inside archive."""
        seen = []

        def record(command, **kwargs):
            seen.append((command, Path.cwd()))
            return _ok()

        target = Target(target_config(configure=True))

        with patch("subprocess.run", side_effect=record):
            target.build()

        assert [c for c, _ in seen] == [["./configure"], ["make"]]
        assert all(cwd == source_tree.resolve() for _, cwd in seen)
        assert Path.cwd() == workdir.resolve()

    def test_no_configure(self, target_config, source_tree):
        """Test configure is skipped unless requested."""
        target = Target(target_config())

        with patch("subprocess.run", side_effect=_ok) as mock_run:
            target.build()

        assert [c.args[0] for c in mock_run.call_args_list] == [["make"]]

    def test_empty_build_command(self, target_config, source_tree):
        """Test an empty build command runs configure only."""
        target = Target(target_config(configure=True, build_command=()))

        with patch("subprocess.run", side_effect=_ok) as mock_run:
            target.build()

        assert [c.args[0] for c in mock_run.call_args_list] == [["./configure"]]

    def test_env_vars_applied(self, target_config, source_tree):
        """Test make_env_vars reach every build subprocess."""
        target = Target(
            target_config(configure=True, make_env_vars=(("CFLAGS", "-O2"),))
        )

        with patch("subprocess.run", side_effect=_ok) as mock_run:
            target.build()

        for call in mock_run.call_args_list:
            assert call.kwargs["env"]["CFLAGS"] == "-O2"

    def test_announces_build(self, target_config, source_tree, caplog):
        """Test the build start is logged."""
        caplog.set_level("INFO", logger="forgekit")
        target = Target(target_config())

        with patch("subprocess.run", side_effect=_ok):
            target.build()

        assert "Building foo" in caplog.text

    def test_configure_failure_restores_cwd(self, target_config, source_tree, workdir):
        """Test a failing configure raises and still restores the directory."""
        target = Target(target_config(configure=True))

        with patch("subprocess.run") as mock_run:
            mock_run.return_value = Mock(returncode=1, stdout="", stderr="no cc")
            with pytest.raises(BuildError, match="configure") as exc_info:
                target.build()

        assert isinstance(exc_info.value.__cause__, CommandError)
        assert exc_info.value.__cause__.returncode == 1
        assert Path.cwd() == workdir.resolve()

    def test_missing_configure_script(self, target_config, source_tree, workdir):
        """Test a configure script that can't be spawned is a BuildError."""
        target = Target(target_config(configure=True))

        with pytest.raises(BuildError, match="failed to run ./configure"):
            target.build()

        assert Path.cwd() == workdir.resolve()

    def test_missing_source_tree(self, target_config, workdir):
        """Test building before acquisition fails cleanly."""
        target = Target(target_config(configure=True))

        with patch("subprocess.run") as mock_run:
            with pytest.raises(BuildError, match="cannot enter source directory"):
                target.build()

        mock_run.assert_not_called()
        assert Path.cwd() == workdir.resolve()


# =============================================================================
# Install
# =============================================================================


class TestInstall:
    """Test install step."""

    @pytest.fixture
    def source_tree(self, workdir) -> Path:
        """Create an already-built source tree."""
        tree = workdir / "archive"
        tree.mkdir()
        return tree

    def test_make_install(self, target_config, source_tree, workdir):
        """Test the install command runs inside archive."""
        cwds = []

        def record(command, **kwargs):
            cwds.append(Path.cwd())
            return _ok()

        target = Target(target_config())

        with patch("subprocess.run", side_effect=record) as mock_run:
            target.install()

        assert mock_run.call_args.args[0] == ["make", "install"]
        assert cwds == [source_tree.resolve()]
        assert Path.cwd() == workdir.resolve()

    def test_sudo_install(self, target_config, source_tree):
        """Test sudo_install elevates the install command."""
        target = Target(target_config(sudo_install=True))

        with patch("subprocess.run", side_effect=_ok) as mock_run:
            target.install()

        assert mock_run.call_args.args[0] == ["sudo", "make", "install"]

    def test_env_vars_applied(self, target_config, source_tree):
        """Test make_env_vars reach the install subprocess."""
        target = Target(target_config(make_env_vars=(("DESTDIR", "/tmp/stage"),)))

        with patch("subprocess.run", side_effect=_ok) as mock_run:
            target.install()

        assert mock_run.call_args.kwargs["env"]["DESTDIR"] == "/tmp/stage"

    def test_empty_install_command(self, target_config, workdir, caplog):
        """Test an empty install command only announces installation."""
        caplog.set_level("INFO", logger="forgekit")
        target = Target(target_config(install_command=()))

        with patch("subprocess.run") as mock_run:
            target.install()

        mock_run.assert_not_called()
        assert "Installing foo" in caplog.text

    def test_install_failure(self, target_config, source_tree, workdir):
        """Test a failing install command raises InstallError."""
        target = Target(target_config())

        with patch("subprocess.run") as mock_run:
            mock_run.return_value = Mock(returncode=2, stdout="", stderr="denied")
            with pytest.raises(InstallError, match="make install"):
                target.install()

        assert Path.cwd() == workdir.resolve()


# =============================================================================
# End to end
# =============================================================================


class TestMirrorTargetEndToEnd:
    """Walk a mirror target from probe to normalized source tree."""

    @responses.activate
    def test_absent_target_is_downloaded(self, workdir, make_tarball):
        """Test foo 2.0 is fetched and normalized to archive."""
        target = Target(
            TargetConfig(
                name="forgekit-test-foo",
                version_command="--version",
                version="2.0",
                mirror="https://example.com/foo-{version}.tar.gz",
            )
        )
        responses.add(
            responses.GET,
            "https://example.com/foo-2.0.tar.gz",
            body=make_tarball("foo-2.0", {"configure": "#!/bin/sh\nexit 0\n"}),
            status=200,
        )

        assert target.is_present() is False

        target.download()

        assert responses.calls[0].request.url == "https://example.com/foo-2.0.tar.gz"
        assert (workdir / "archive" / "configure").is_file()
        assert not (workdir / "foo-2.0").exists()

    @responses.activate
    def test_checksum_verified(self, workdir, make_tarball, target_config):
        """Test a configured sha256 is checked against the archive."""
        body = make_tarball("foo-2.0")
        responses.add(
            responses.GET, "https://example.com/foo-2.0.tar.gz", body=body, status=200
        )
        target = Target(target_config(sha256=hashlib.sha256(body).hexdigest()))

        target.download()

        assert (workdir / "archive").is_dir()

    @responses.activate
    def test_checksum_mismatch(self, workdir, make_tarball, target_config):
        """Test a wrong sha256 stops acquisition before extraction."""
        responses.add(
            responses.GET,
            "https://example.com/foo-2.0.tar.gz",
            body=make_tarball("foo-2.0"),
            status=200,
        )
        target = Target(target_config(sha256="0" * 64))

        with pytest.raises(ChecksumError, match="Checksum mismatch"):
            target.download()

        assert not (workdir / "archive.tar.gz").exists()
        assert not (workdir / "foo-2.0").exists()
