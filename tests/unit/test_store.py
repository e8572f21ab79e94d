"""
Unit tests for the credential file store and config paths
"""
import json
import os
import stat
from datetime import datetime, timezone

import pytest

from oura_cli.auth.exceptions import ConfigStoreError
from oura_cli.auth.models import Credential
from oura_cli.auth.store import ConfigStore
from oura_cli.utils.paths import get_config_dir, get_config_path, get_home_dir

EXPIRY = datetime(2026, 1, 15, 13, 0, tzinfo=timezone.utc)


def test_config_path_is_derived_from_home(tmp_path):
    assert get_config_dir(tmp_path) == tmp_path / ".config" / "oura-cli"
    assert get_config_path(tmp_path) == tmp_path / ".config" / "oura-cli" / "config.json"


def test_home_override(tmp_path):
    assert get_home_dir(tmp_path) == tmp_path.resolve()


def test_missing_file_is_empty_credential(store):
    credential = store.load()

    assert credential == Credential()
    assert not credential.is_authenticated


def test_save_then_load(store):
    credential = Credential(
        client_id="client",
        client_secret="secret",
        access_token="T",
        refresh_token="R",
        expires_at=EXPIRY,
    )

    store.save(credential)

    assert store.load() == credential


def test_saved_file_layout(store):
    store.save(Credential(client_id="client", access_token="T", expires_at=EXPIRY))

    with open(store.path) as f:
        record = json.load(f)

    assert record == {
        "client_id": "client",
        "client_secret": "",
        "access_token": "T",
        "refresh_token": "",
        "expiry": "2026-01-15T13:00:00+00:00",
    }


@pytest.mark.skipif(os.name != "posix", reason="POSIX permissions only")
def test_saved_file_is_private(store):
    store.save(Credential(access_token="T"))

    assert stat.S_IMODE(store.path.stat().st_mode) == 0o600


@pytest.mark.skipif(os.name != "posix", reason="POSIX permissions only")
def test_failed_write_leaves_no_readable_temp_file(store, mocker):
    store.save(Credential(access_token="previous"))
    temp_path = store.path.with_suffix(".tmp")
    modes = []

    def failing_dump(record, f, **kwargs):
        f.write('{"access_token": "partial')
        f.flush()
        modes.append(stat.S_IMODE(temp_path.stat().st_mode))
        raise OSError("disk full")

    mocker.patch("oura_cli.auth.store.json.dump", side_effect=failing_dump)

    with pytest.raises(ConfigStoreError):
        store.save(Credential(access_token="next"))

    assert modes == [0o600]
    assert not temp_path.exists()
    assert json.loads(store.path.read_text())["access_token"] == "previous"


def test_save_overwrites_previous_record(store):
    store.save(Credential(access_token="first"))
    store.save(Credential(access_token="second"))

    assert store.load().access_token == "second"
    assert not store.path.with_suffix(".tmp").exists()


def test_corrupt_file_raises(store):
    store.path.parent.mkdir(parents=True)
    store.path.write_text("{not json")

    with pytest.raises(ConfigStoreError):
        store.load()


def test_non_object_file_raises(store):
    store.path.parent.mkdir(parents=True)
    store.path.write_text("[]")

    with pytest.raises(ConfigStoreError):
        store.load()


def test_partial_file_fills_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"client_id": "client"}))

    credential = ConfigStore(path).load()

    assert credential.client_id == "client"
    assert credential.access_token == ""
    assert credential.expires_at is None
