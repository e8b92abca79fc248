import io
import json

import pytest

from goreleases import cli
from goreleases.catalog.interfaces import Release, ReleaseFile, releases_to_json
from goreleases.exceptions import UpstreamError

pytestmark = [pytest.mark.cli, pytest.mark.unit]

CATALOG = [
    Release(
        version="go1.16",
        stable=True,
        files=[
            ReleaseFile(
                filename="go1.16.src.tar.gz",
                version="go1.16",
                sha256="abc",
                size=10,
                kind="source",
            )
        ],
    )
]


@pytest.fixture
def mock_fetch(mocker):
    return mocker.patch("goreleases.cli.fetch_releases", return_value=CATALOG)


class TestFetchCommand:
    def test_prints_catalog(self, mock_fetch, capsys):
        assert cli.main(["fetch"]) == 0

        out = capsys.readouterr().out
        assert json.loads(out)[0]["version"] == "go1.16"
        assert out == releases_to_json(CATALOG) + "\n"
        options = mock_fetch.call_args.args[0]
        assert options.skip_versions == frozenset({"go1.7.2"})

    def test_exclude_replaces_configured_skips(self, mock_fetch):
        cli.main(["fetch", "--exclude", "go1.8rc1", "--exclude", "go1.9rc1"])
        options = mock_fetch.call_args.args[0]
        assert options.skip_versions == frozenset({"go1.8rc1", "go1.9rc1"})

    def test_output_file(self, mock_fetch, tmp_path, capsys):
        target = tmp_path / "releases.json"
        assert cli.main(["fetch", "--output", str(target)]) == 0
        assert target.read_text(encoding="utf-8") == releases_to_json(CATALOG) + "\n"
        assert capsys.readouterr().out == ""

    def test_config_file(self, mock_fetch, tmp_path):
        config_file = tmp_path / "custom.yaml"
        config_file.write_text(
            "SKIP_VERSIONS: []\nMAX_CHECKSUM_WORKERS: 4\n", encoding="utf-8"
        )
        cli.main(["--config", str(config_file), "fetch"])
        options = mock_fetch.call_args.args[0]
        assert options.skip_versions == frozenset()
        assert options.max_workers == 4

    def test_upstream_error_exits_non_zero(self, mocker):
        mocker.patch(
            "goreleases.cli.fetch_releases",
            side_effect=UpstreamError("error retrieving storage objects"),
        )
        assert cli.main(["fetch"]) == 1


class TestCheckConflictsCommand:
    def write(self, path, releases):
        path.write_text(releases_to_json(releases), encoding="utf-8")
        return str(path)

    def test_no_conflicts(self, tmp_path):
        base = self.write(tmp_path / "base.json", CATALOG)
        head = self.write(tmp_path / "head.json", CATALOG)
        assert cli.main(["check-conflicts", base, head]) == 0

    def test_conflicts(self, tmp_path, capsys):
        base = self.write(tmp_path / "base.json", CATALOG)
        head = self.write(tmp_path / "head.json", [])
        assert cli.main(["check-conflicts", base, head]) == 1
        out = capsys.readouterr().out
        assert "found a conflict that prevents automatic merging" in out
        assert 'head is missing release "go1.16"' in out

    def test_unreadable_catalog(self, tmp_path):
        base = self.write(tmp_path / "base.json", CATALOG)
        assert cli.main(["check-conflicts", base, str(tmp_path / "nope.json")]) == 2

    def test_malformed_catalog(self, tmp_path):
        base = self.write(tmp_path / "base.json", CATALOG)
        head = tmp_path / "head.json"
        head.write_text('{"version": "go1.16"}', encoding="utf-8")
        assert cli.main(["check-conflicts", base, str(head)]) == 2


class TestSelectCommand:
    def test_selects_newest_first(self, capsys):
        code = cli.main(
            ["select", "-c", "~1.15", "go1.15", "go1.16", "go1.15.8", "1.15.2"]
        )
        assert code == 0
        assert capsys.readouterr().out.splitlines() == ["go1.15.8", "go1.15.2", "go1.15"]

    def test_max_results(self, capsys):
        cli.main(["select", "-c", "1.x", "-n", "1", "go1.14", "go1.16"])
        assert capsys.readouterr().out == "go1.16\n"

    def test_reads_candidates_from_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("go1.14\n\ngo1.15.3\ngo1.16rc1\n"))
        assert cli.main(["select", "-c", "1.x", "-"]) == 0
        assert capsys.readouterr().out.splitlines() == ["go1.15.3", "go1.14"]

    def test_invalid_candidate_fails(self, capsys):
        assert cli.main(["select", "-c", "1.x", "go1.16", "not-a-version"]) == 1
        assert capsys.readouterr().out == ""

    def test_ignore_invalid(self, capsys):
        code = cli.main(["select", "-i", "-c", "1.x", "go1.16", "not-a-version"])
        assert code == 0
        assert capsys.readouterr().out == "go1.16\n"

    def test_invalid_constraint(self, capsys):
        assert cli.main(["select", "-c", "asdf", "go1.16"]) == 1
        assert "invalid constraint: 'asdf'" in capsys.readouterr().err

    def test_validate_constraint(self, capsys):
        assert cli.main(["select", "-c", "^1.2beta1", "--validate-constraint"]) == 0
        assert capsys.readouterr().out == "^1.2.0-beta1\n"

    def test_validate_invalid_constraint(self):
        assert cli.main(["select", "-c", "asdf", "--validate-constraint"]) == 1

    def test_constraint_is_required(self):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["select", "go1.16"])
        assert exc_info.value.code == 2


class TestGlobalOptions:
    def test_log_level(self, mock_fetch, mocker):
        set_level = mocker.patch("goreleases.cli.log_utils.set_log_level")
        cli.main(["--log-level", "DEBUG", "fetch"])
        set_level.assert_called_once_with("DEBUG")

    def test_log_level_from_config(self, mock_fetch, mocker, tmp_path):
        set_level = mocker.patch("goreleases.cli.log_utils.set_log_level")
        config_file = tmp_path / "custom.yaml"
        config_file.write_text("LOG_LEVEL: WARNING\n", encoding="utf-8")
        cli.main(["--config", str(config_file), "fetch"])
        set_level.assert_called_once_with("WARNING")

    def test_command_is_required(self):
        with pytest.raises(SystemExit):
            cli.main([])
