from upload_gateway.core.config import Settings


def test_defaults_follow_original_deployment(monkeypatch):
    for name in ("S3_ENDPOINT", "S3_REGION", "PORT", "CORS_ALLOW_ORIGINS", "FRONTEND_ORIGIN"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)
    assert settings.s3_endpoint == "https://s3.eu-central-003.backblazeb2.com"
    assert settings.s3_addressing_style == "path"
    assert settings.port == 8080
    assert settings.storage_sign_ttl_seconds == 900
    assert settings.storage_proxy_ttl_seconds == 3600
    assert settings.storage_max_upload_bytes == 5 * 1024**3
    assert settings.list_max_keys == 1000
    assert settings.allowed_origins == []


def test_legacy_env_names_are_accepted(monkeypatch):
    monkeypatch.setenv("R2_ACCESS_KEY_ID", "legacy-key")
    monkeypatch.setenv("R2_SECRET_ACCESS_KEY", "legacy-secret")
    monkeypatch.setenv("R2_BUCKET", "clips")
    monkeypatch.setenv("R2_PUBLIC_BASE_URL", "https://pub.example.com/")
    monkeypatch.setenv("FRONTEND_ORIGIN", "https://a.example.com, https://b.example.com")
    for name in ("S3_ACCESS_KEY", "S3_SECRET_KEY", "S3_BUCKET", "S3_PUBLIC_BASE_URL", "CORS_ALLOW_ORIGINS"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.s3_access_key == "legacy-key"
    assert settings.s3_bucket == "clips"
    assert settings.credentials_configured
    assert settings.public_base_url == "https://pub.example.com"
    assert settings.allowed_origins == ["https://a.example.com", "https://b.example.com"]


def test_missing_credentials_are_not_fatal(monkeypatch):
    for name in ("S3_ACCESS_KEY", "S3_SECRET_KEY", "R2_ACCESS_KEY_ID", "R2_SECRET_ACCESS_KEY"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)
    assert not settings.credentials_configured
