import pytest

from vivado_host_setup.errors import ExternalToolFailure, PermissionDenied, PreflightFailed
from vivado_host_setup.lib import host
from vivado_host_setup.lib.command import CmdResult, run_cmd


class FakeRunner:
    """Stands in for run_cmd; fails any argv whose first word is in ``failing``."""

    def __init__(self, failing=(), returncodes=None):
        self.calls = []
        self.failing = set(failing)
        self.returncodes = returncodes or {}

    def __call__(self, argv, *, check=True, dry_run=False, **kwargs):
        argv = list(argv)
        self.calls.append(argv)
        if argv[0] in self.failing:
            raise ExternalToolFailure(f"{argv[0]} failed", returncode=1)
        rc = self.returncodes.get(argv[0], 0)
        if check and rc != 0:
            raise ExternalToolFailure(f"{argv[0]} failed", returncode=rc)
        return CmdResult(argv=argv, returncode=rc, stdout="", stderr="")


def test_run_cmd_dry_run_does_not_execute():
    r = run_cmd(["definitely-not-a-real-binary", "--x"], dry_run=True)
    assert r.returncode == 0


def test_run_cmd_missing_binary_is_external_failure():
    with pytest.raises(ExternalToolFailure):
        run_cmd(["definitely-not-a-real-binary-4242"])


def test_validate_macos(monkeypatch):
    monkeypatch.setattr(host.platform, "system", lambda: "Linux")
    with pytest.raises(PreflightFailed):
        host.validate_macos()
    monkeypatch.setattr(host.platform, "system", lambda: "Darwin")
    host.validate_macos()


def test_root_refused():
    with pytest.raises(PreflightFailed):
        host.ensure_not_root("root")
    host.ensure_not_root("alice")


def test_chown_succeeds_without_sudo(monkeypatch, tmp_path):
    fake = FakeRunner()
    monkeypatch.setattr(host, "run_cmd", fake)
    host.chown_tree(tmp_path, "alice")
    assert fake.calls == [["chown", "-R", "alice", str(tmp_path)]]


def test_chown_retries_once_with_sudo(monkeypatch, tmp_path):
    fake = FakeRunner(failing={"chown"})
    monkeypatch.setattr(host, "run_cmd", fake)
    host.chown_tree(tmp_path, "alice")
    assert fake.calls[-1] == ["sudo", "chown", "-R", "alice", str(tmp_path)]
    assert len(fake.calls) == 2


def test_chown_gives_up_after_sudo(monkeypatch, tmp_path):
    fake = FakeRunner(failing={"chown", "sudo"})
    monkeypatch.setattr(host, "run_cmd", fake)
    with pytest.raises(PermissionDenied):
        host.chown_tree(tmp_path, "alice")
    assert len(fake.calls) == 2


def test_rosetta_not_needed_on_intel(monkeypatch):
    fake = FakeRunner()
    monkeypatch.setattr(host, "run_cmd", fake)
    monkeypatch.setattr(host.platform, "machine", lambda: "x86_64")
    assert host.ensure_rosetta() == "not_required"
    assert fake.calls == []


def test_rosetta_installed_when_missing(monkeypatch):
    fake = FakeRunner(returncodes={"arch": 1})
    monkeypatch.setattr(host, "run_cmd", fake)
    monkeypatch.setattr(host.platform, "machine", lambda: "arm64")
    assert host.ensure_rosetta() == "installed"
    assert fake.calls[-1][0] == "softwareupdate"


def test_quarantine_removal_falls_back_to_user(monkeypatch, tmp_path, prompter_factory):
    fake = FakeRunner()

    def runner(argv, **kwargs):
        if argv[:2] == ["xattr", "-d"]:
            fake.calls.append(list(argv))
            raise ExternalToolFailure("xattr failed")
        return fake(argv, **kwargs)

    monkeypatch.setattr(host, "run_cmd", runner)
    prompter = prompter_factory("")
    assert host.remove_quarantine(tmp_path / "xvcd", prompter) is True
    assert prompter.input_fn.asked == 1


def test_make_executable_failure(monkeypatch, tmp_path):
    monkeypatch.setattr(host, "run_cmd", FakeRunner(failing={"chmod"}))
    with pytest.raises(ExternalToolFailure):
        host.make_executable([tmp_path / "a.sh"])


def test_install_autostart(workdir):
    dst = host.install_autostart(workdir)
    assert dst == workdir / ".config" / "autostart" / "de_start.desktop"
    assert dst.read_text() == (workdir / "scripts" / "de_start.desktop").read_text()
    assert (workdir / "Desktop").is_dir()

    # second run is harmless
    host.install_autostart(workdir)
