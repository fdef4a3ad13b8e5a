from route_optimizer.config import Settings


def test_geoapify_key_read_from_plain_env_name(monkeypatch):
    monkeypatch.delenv("ROUTES_GEOAPIFY_API_KEY", raising=False)
    monkeypatch.setenv("GEOAPIFY_API_KEY", "plain-key")

    assert Settings(_env_file=None).geoapify_api_key == "plain-key"


def test_blank_geoapify_key_counts_as_missing(monkeypatch):
    monkeypatch.delenv("GEOAPIFY_API_KEY", raising=False)
    monkeypatch.setenv("ROUTES_GEOAPIFY_API_KEY", "   ")

    assert Settings(_env_file=None).geoapify_api_key is None


def test_allowed_origins_accept_comma_separated_values(monkeypatch):
    monkeypatch.setenv("ROUTES_FRONTEND_ALLOWED_ORIGINS", "https://a.example, https://b.example")

    settings = Settings(_env_file=None)

    assert settings.frontend_allowed_origins == ("https://a.example", "https://b.example")


def test_defaults(monkeypatch):
    for name in ("ROUTES_MAX_OPTIMIZE_ACTIVITIES", "ROUTES_DEFAULT_TRAVEL_MODE", "ROUTES_MATRIX_TTL_SECONDS"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.max_optimize_activities == 25
    assert settings.default_travel_mode == "drive"
    assert settings.matrix_ttl_seconds == 600
    assert settings.autocomplete_ttl_seconds == 300
