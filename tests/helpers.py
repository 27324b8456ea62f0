"""Helpers shared by the tests: a scripted process runner standing in for git."""

from pathlib import Path

from repopin.infra.process_runner import FAILED_TO_RUN, IOMode, ProcessResult, ProcessRunner

TAG_OBJECT = "a" * 40
TAG_COMMIT = "b" * 40
OLD_COMMIT = "c" * 40
MAIN_COMMIT = "d" * 40


def ok(stdout="", stderr=""):
    return ProcessResult(returncode=0, stdout=stdout, stderr=stderr)


def failed(returncode=1, stderr="error"):
    return ProcessResult(returncode=returncode, stderr=stderr)


class ScriptedRunner(ProcessRunner):
    """
    Fake ProcessRunner answering by git subcommand.

    `responses` maps a subcommand ("ls-remote", "clone", ...) to a
    ProcessResult or to a callable taking the argument list. Unscripted
    subcommands behave like a missing binary.
    """

    def __init__(self, responses=None):
        super().__init__()
        self.responses = dict(responses or {})
        self.calls = []

    def run(self, executable, args, cwd=None, io_mode=IOMode.CAPTURE, timeout=None):
        args = list(args)
        self.calls.append({
            'executable': executable,
            'args': args,
            'cwd': cwd,
            'io_mode': io_mode,
        })
        response = self.responses.get(args[0])
        if response is None:
            return ProcessResult(args=[executable, *args], returncode=FAILED_TO_RUN,
                                 stderr=f"{executable}: not scripted")
        if callable(response):
            response = response(args)
        return response

    def subcommands(self):
        return [call['args'][0] for call in self.calls]


def write_files(root, files):
    """Create `files` ({relative path: bytes}) under root."""
    root = Path(root)
    for name, content in files.items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)


def ls_tree_output(files):
    """Unsorted NUL-separated listing, as `git ls-tree -z` would print it."""
    return "".join(f"{name}\0" for name in reversed(list(files)))


