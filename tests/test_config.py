from daswos_ledger.core.config import Settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("DATABASE__URL", raising=False)

    settings = Settings(_env_file=None)

    assert settings.database_url == "sqlite+aiosqlite:///./daswos_ledger.db"
    assert settings.api_prefix == "/api"
    assert settings.ledger.system_account_id == 0
    assert settings.ledger.initial_supply == 1_000_000_000
    assert settings.ledger.default_page_size == 10
    assert settings.logging.level == "INFO"


def test_nested_env_overrides(monkeypatch):
    monkeypatch.setenv("LEDGER__INITIAL_SUPPLY", "5000")
    monkeypatch.setenv("LEDGER__MAX_PAGE_SIZE", "25")
    monkeypatch.setenv("DATABASE__URL", "postgresql+asyncpg://ledger@db/ledger")
    monkeypatch.setenv("LOGGING__LEVEL", "DEBUG")

    settings = Settings(_env_file=None)

    assert settings.ledger.initial_supply == 5000
    assert settings.ledger.max_page_size == 25
    assert settings.database_url == "postgresql+asyncpg://ledger@db/ledger"
    assert settings.logging.level == "DEBUG"
