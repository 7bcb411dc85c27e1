import pytest

from catalog_manager import cli


@pytest.mark.parametrize(
    ("address", "expected"),
    [
        ("0.0.0.0:8080", ("0.0.0.0", 8080)),
        ("127.0.0.1:9000", ("127.0.0.1", 9000)),
        (":8080", ("0.0.0.0", 8080)),
    ],
)
def test_parse_bind_address(address, expected):
    assert cli.parse_bind_address(address) == expected


@pytest.mark.parametrize("address", ["8080", "localhost:", "localhost:http"])
def test_parse_bind_address_rejects_malformed(address):
    with pytest.raises(ValueError):
        cli.parse_bind_address(address)


def test_serve_uses_bind_override(monkeypatch, settings):
    calls = []
    monkeypatch.setattr(cli.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

    assert cli.serve_command(settings, bind="127.0.0.1:9001") == 0
    assert calls == [
        ("catalog_manager.api.main:app", {"host": "127.0.0.1", "port": 9001, "log_config": None})
    ]


def test_serve_rejects_bad_bind(settings):
    assert cli.serve_command(settings, bind="nonsense") == 1


def test_seed_command_against_sqlite(tmp_path, settings):
    db_settings = settings.model_copy(
        update={"database_url": f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}"}
    )

    assert cli.seed_command(db_settings) == 0
    assert (tmp_path / "catalog.db").exists()


def test_main_without_command_exits_nonzero(monkeypatch, capsys):
    monkeypatch.setattr(cli, "configure_logging", lambda *args, **kwargs: None)

    with pytest.raises(SystemExit) as exc_info:
        cli.main([])

    assert exc_info.value.code == 1
    assert "serve" in capsys.readouterr().out
