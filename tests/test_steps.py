import hashlib
import json
import logging

import pytest

from vivado_host_setup.context import SetupCtx
from vivado_host_setup.errors import AbortedByUser, ExternalToolFailure, PreflightFailed
from vivado_host_setup.config import load_setup_config
from vivado_host_setup.lib.docker import container_argv
from vivado_host_setup.lib.versions import DictVersionTable
from vivado_host_setup.state_store import ensure_defaults
from vivado_host_setup.steps import (
    ConfigureDockerStep,
    ConsentStep,
    LaunchContainerStep,
    PreflightStep,
    PrepareWorkdirStep,
    ResolutionStep,
    SelectInstallerStep,
)
from vivado_host_setup.steps import step_10_preflight, step_60_configure_docker, step_90_launch_container


@pytest.fixture
def stopped(monkeypatch):
    """Replace the Docker start/stop calls with a recorder."""
    events = []
    monkeypatch.setattr(step_60_configure_docker, "start_docker", lambda **kw: events.append("start"))

    from contextlib import contextmanager

    @contextmanager
    def fake_stopped(**kw):
        events.append("stop")
        try:
            yield
        finally:
            events.append("restart")

    monkeypatch.setattr(step_60_configure_docker, "docker_stopped", fake_stopped)
    return events


def _cfg_with_settings(workdir, settings_path, **kw):
    return load_setup_config(
        workdir,
        current_user="alice",
        overrides={"docker": {"settings_candidates": [str(settings_path)]}},
        **kw,
    )


def test_configure_docker_patches_while_stopped(workdir, tmp_path, stopped, settings_text, prompter_factory):
    settings = tmp_path / "settings-store.json"
    settings.write_text(settings_text(swap=2048), encoding="utf-8")
    ctx = SetupCtx(cfg=_cfg_with_settings(workdir, settings), prompter=prompter_factory())

    state = ConfigureDockerStep(ctx).run(ensure_defaults({}))

    assert stopped == ["start", "stop", "restart"]
    assert json.loads(settings.read_text())["SwapMiB"] == 4096
    assert state["execution"]["decisions"]["docker_settings"] == "patched"


def test_configure_docker_falls_back_to_manual_instructions(workdir, tmp_path, stopped, prompter_factory):
    settings = tmp_path / "settings.json"
    settings.write_text('{"AutoStart": true}', encoding="utf-8")
    prompter = prompter_factory("")
    ctx = SetupCtx(cfg=_cfg_with_settings(workdir, settings), prompter=prompter)

    state = ConfigureDockerStep(ctx).run(ensure_defaults({}))

    assert settings.read_text() == '{"AutoStart": true}'
    assert prompter.input_fn.asked == 1
    assert stopped == ["start", "stop", "restart"]
    assert state["execution"]["decisions"]["docker_settings"] == "manual"


def test_configure_docker_missing_file_does_not_stop_docker(workdir, tmp_path, stopped, prompter_factory):
    ctx = SetupCtx(cfg=_cfg_with_settings(workdir, tmp_path / "absent.json"), prompter=prompter_factory(""))
    state = ConfigureDockerStep(ctx).run(ensure_defaults({}))
    assert stopped == ["start"]
    assert state["execution"]["decisions"]["docker_settings"] == "manual"


def test_consent_declined(cfg, prompter_factory):
    with pytest.raises(AbortedByUser):
        ConsentStep(SetupCtx(cfg=cfg, prompter=prompter_factory("n"))).run({})


def test_preflight_refuses_previous_install(cfg, monkeypatch):
    monkeypatch.setattr(step_10_preflight, "validate_macos", lambda: None)
    monkeypatch.setattr(step_10_preflight, "is_online", lambda *a, **kw: True)
    cfg.previous_install_dir.mkdir()
    with pytest.raises(PreflightFailed):
        PreflightStep(SetupCtx(cfg=cfg)).run({})


def test_preflight_requires_network(cfg, monkeypatch):
    monkeypatch.setattr(step_10_preflight, "validate_macos", lambda: None)
    monkeypatch.setattr(step_10_preflight, "is_online", lambda *a, **kw: False)
    with pytest.raises(PreflightFailed):
        PreflightStep(SetupCtx(cfg=cfg)).run({})


def test_select_installer_records_decisions(cfg, prompter_factory):
    (cfg.workdir / "hash").write_text("deadbeef")
    installer = cfg.workdir / "Xilinx.bin"
    installer.write_bytes(b"x")
    ctx = SetupCtx(cfg=cfg, prompter=prompter_factory(str(installer), ""))

    state = SelectInstallerStep(ctx, table=DictVersionTable({"deadbeef": "2021.1"})).run(ensure_defaults({}))

    d = state["execution"]["decisions"]
    assert d["vivado_version"] == "2021.1"
    assert d["installer_path"] == str(installer)


def test_prepare_workdir_dry_run(workdir, prompter_factory):
    cfg = load_setup_config(workdir, current_user="alice", dry_run=True)
    state = ensure_defaults({})
    state["execution"]["decisions"]["installer_path"] = str(cfg.workdir / "Xilinx_2021.1.tar")

    state = PrepareWorkdirStep(SetupCtx(cfg=cfg, prompter=prompter_factory())).run(state)

    d = state["execution"]["decisions"]
    assert d["install_bin"] == "/home/user/Xilinx_2021.1.tar"
    assert d["installer_extracted_to"] == str(cfg.workdir / "installer")
    assert not cfg.install_bin_file.exists()


def test_prepare_workdir_requires_installer(cfg):
    with pytest.raises(RuntimeError):
        PrepareWorkdirStep(SetupCtx(cfg=cfg)).run(ensure_defaults({}))


@pytest.mark.parametrize("answer,expected", [("1280x720", "1280x720"), ("abc", "1920x1080"), ("", "1920x1080")])
def test_resolution_step_writes_file(cfg, prompter_factory, answer, expected):
    state = ResolutionStep(SetupCtx(cfg=cfg, prompter=prompter_factory(answer))).run(ensure_defaults({}))
    assert cfg.resolution_file.read_text() == expected + "\n"
    assert state["execution"]["decisions"]["vnc_resolution"] == expected


def test_container_argv(cfg):
    argv = container_argv(cfg)
    assert argv[:2] == ["docker", "run"]
    assert f"type=bind,source={cfg.workdir},target=/home/user" in argv
    assert "127.0.0.1:5901:5901" in argv
    assert argv[argv.index("--platform") + 1] == "linux/amd64"
    assert argv[-1] == "/home/user/scripts/install_vivado.sh"


def test_launch_container_failure_surfaces(cfg, monkeypatch):
    monkeypatch.setattr(step_90_launch_container, "run_container", lambda c: 3)
    with pytest.raises(ExternalToolFailure) as exc:
        LaunchContainerStep(SetupCtx(cfg=cfg)).run({})
    assert exc.value.returncode == 3


def test_select_installer_dry_run_leaves_no_hash(workdir, prompter_factory):
    cfg = load_setup_config(workdir, current_user="alice", dry_run=True)
    installer = cfg.workdir / "Xilinx.bin"
    installer.write_bytes(b"payload")
    md5 = hashlib.md5(b"payload").hexdigest()
    ctx = SetupCtx(cfg=cfg, prompter=prompter_factory(str(installer)))

    state = SelectInstallerStep(ctx, table=DictVersionTable({md5: "2022.2"})).run(ensure_defaults({}))

    assert state["execution"]["decisions"]["vivado_version"] == "2022.2"
    assert not cfg.hash_cache_path.exists()


def test_empty_version_table_warns(cfg, prompter_factory, caplog):
    ctx = SetupCtx(cfg=cfg, prompter=prompter_factory())
    with caplog.at_level(logging.WARNING):
        with pytest.raises(AbortedByUser):
            SelectInstallerStep(ctx, table=DictVersionTable({})).run(ensure_defaults({}))
    assert any("--versions" in r.getMessage() for r in caplog.records if r.levelno == logging.WARNING)
