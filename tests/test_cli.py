"""
Tests for the repopin command line, driven through click's CliRunner with a
scripted process runner in place of git.
"""

import hashlib
import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from repopin.cli import cli
from repopin.exit_codes import (
    CONFIG_ERROR,
    DATA_ERROR,
    DIGEST_MISMATCH,
    FETCH_ERROR,
    NETWORK_ERROR,
    NO_MATCH,
    VERIFICATION_ERROR,
)

from tests.helpers import (
    MAIN_COMMIT,
    OLD_COMMIT,
    TAG_COMMIT,
    ScriptedRunner,
    failed,
    ls_tree_output,
    ok,
    write_files,
)

REMOTE = "https://example.com/project.git"
FILES = {"a.txt": b"a\n", "dir/b.txt": b"b\n"}


def json_lines(output):
    return [json.loads(line) for line in output.splitlines() if line.startswith("{")]


@pytest.fixture
def scripted(tags_listing):
    def clone(args):
        write_files(Path(args[-1]), FILES)
        return ok()

    return ScriptedRunner({
        "ls-remote": lambda args: ok(
            tags_listing if "--tags" in args
            else f"{MAIN_COMMIT}\trefs/heads/main\n{OLD_COMMIT}\trefs/heads/dev\n"
        ),
        "clone": clone,
        "rev-parse": ok(f"{TAG_COMMIT}\n"),
        "ls-tree": ok(ls_tree_output(FILES)),
        "verify-tag": ok(),
        "verify-commit": ok(),
    })


@pytest.fixture
def invoke(scripted, default_config):
    runner = CliRunner()

    def _invoke(*args):
        return runner.invoke(cli, list(args), obj={'config': default_config, 'runner': scripted})

    return _invoke


class TestRefCommands:

    def test_tags_descending(self, invoke):
        result = invoke("tags", REMOTE)

        assert result.exit_code == 0
        names = [row['name'] for row in json_lines(result.stdout)]
        assert names == ["v2.0.0-rc", "v1.2.0", "v1.0.0"]

    def test_tags_ascending_and_all(self, invoke):
        result = invoke("tags", REMOTE, "--ascending", "--all")

        assert result.exit_code == 0
        names = [row['name'] for row in json_lines(result.stdout)]
        assert names == ["v1.0.0", "v1.2.0", "v2.0.0-rc", "nightly"]

    def test_tags_pretty(self, invoke):
        result = invoke("tags", REMOTE, "--pretty")

        assert result.exit_code == 0
        assert "v1.2.0" in result.stdout
        assert not json_lines(result.stdout)

    def test_branches(self, invoke):
        result = invoke("branches", REMOTE)

        assert result.exit_code == 0
        assert json_lines(result.stdout) == [
            {'branch': 'dev', 'commit': OLD_COMMIT},
            {'branch': 'main', 'commit': MAIN_COMMIT},
        ]

    def test_match(self, invoke):
        result = invoke("match", REMOTE, "^1.0.0")

        assert result.exit_code == 0
        assert json_lines(result.stdout)[0]['name'] == "v1.2.0"

    def test_match_none(self, invoke):
        result = invoke("match", REMOTE, "^7.0.0")

        assert result.exit_code == NO_MATCH
        error = json_lines(result.stdout)[0]
        assert error['type'] == "NoMatchingTagError"
        assert error['exit_code'] == NO_MATCH

    def test_match_invalid_constraint(self, invoke):
        result = invoke("match", REMOTE, "not-a-range")

        assert result.exit_code == DATA_ERROR
        assert json_lines(result.stdout)[0]['type'] == "ValueError"

    def test_unreachable_remote(self, invoke, scripted):
        scripted.responses["ls-remote"] = failed(128, "fatal: unable to access")

        result = invoke("tags", REMOTE)

        assert result.exit_code == NETWORK_ERROR


class TestCheckoutCommands:

    def test_clone_with_ref(self, invoke, scripted, tmp_path):
        result = invoke("clone", REMOTE, str(tmp_path / "out"), "--ref", "v1.2.0")

        assert result.exit_code == 0
        assert json_lines(result.stdout)[0]['head_commit'] == TAG_COMMIT
        assert "--branch" in scripted.calls[0]['args']

    def test_clone_into_non_empty_directory(self, invoke, scripted, tmp_path):
        (tmp_path / "existing.txt").write_text("x")

        result = invoke("clone", REMOTE, str(tmp_path))

        assert result.exit_code == FETCH_ERROR
        assert scripted.calls == []

    def test_verify_tag(self, invoke, scripted, tmp_path):
        result = invoke("verify", str(tmp_path), "--tag", "v1.2.0")

        assert result.exit_code == 0
        assert json_lines(result.stdout) == [{'target': 'v1.2.0', 'verified': True}]

    def test_verify_defaults_to_head_commit(self, invoke, scripted, tmp_path):
        result = invoke("verify", str(tmp_path))

        assert result.exit_code == 0
        assert scripted.calls[-1]['args'] == ["verify-commit", TAG_COMMIT]

    def test_verify_failure(self, invoke, scripted, tmp_path):
        scripted.responses["verify-tag"] = failed(1, "gpg: BAD signature")

        result = invoke("verify", str(tmp_path), "--tag", "v1.2.0")

        assert result.exit_code == VERIFICATION_ERROR
        assert json_lines(result.stdout)[0]['error'] == "Could not verify signature"

    def test_verify_rejects_tag_and_commit(self, invoke, tmp_path):
        result = invoke("verify", str(tmp_path), "--tag", "v1", "--commit", TAG_COMMIT)

        assert result.exit_code == 2

    def test_tree_hash(self, invoke, tmp_path):
        write_files(tmp_path, FILES)

        result = invoke("tree-hash", str(tmp_path), "--algorithm", "sha256")

        assert result.exit_code == 0
        row = json_lines(result.stdout)[0]
        ctx = hashlib.sha256()
        for name in sorted(FILES):
            ctx.update(f"{hashlib.sha256(FILES[name]).hexdigest()}  {name}\n".encode())
        assert row['tree_hash'] == ctx.hexdigest()
        assert row['algorithm'] == "sha256"

    def test_tree_hash_variable_length_algorithm(self, invoke, scripted, tmp_path):
        write_files(tmp_path, FILES)

        result = invoke("tree-hash", str(tmp_path), "--algorithm", "shake_128")

        assert result.exit_code == CONFIG_ERROR
        assert json_lines(result.stdout)[0]['type'] == "ConfigError"
        assert scripted.calls == []

    def test_tree_hash_manifest(self, invoke, tmp_path):
        write_files(tmp_path, FILES)

        result = invoke("tree-hash", str(tmp_path), "--manifest")

        assert result.exit_code == 0
        assert result.stdout_bytes == b"".join(
            f"{hashlib.sha512(FILES[name]).hexdigest()}  {name}\n".encode() for name in sorted(FILES)
        )

    def test_snapshot(self, invoke, tmp_path):
        result = invoke("snapshot", REMOTE, "^1.0.0", str(tmp_path / "snap"))

        assert result.exit_code == 0
        row = json_lines(result.stdout)[0]
        assert row['tag'] == "v1.2.0"
        assert row['verified'] is True
        assert (tmp_path / "snap" / "dir" / "b.txt").exists()

    def test_snapshot_expect_mismatch(self, invoke, tmp_path):
        result = invoke("snapshot", REMOTE, "^1.0.0", str(tmp_path / "snap"), "--expect", "ab" * 64)

        assert result.exit_code == DIGEST_MISMATCH

    def test_snapshot_no_verify(self, invoke, scripted, tmp_path):
        result = invoke("snapshot", REMOTE, "^1.0.0", str(tmp_path / "snap"), "--no-verify")

        assert result.exit_code == 0
        assert json_lines(result.stdout)[0]['verified'] is False
        assert "verify-tag" not in scripted.subcommands()
