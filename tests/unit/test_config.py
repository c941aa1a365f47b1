from src.infrastructure.config import Settings


def test_defaults(monkeypatch):
    for name in (
        "SUPABASE_DISABLED",
        "FCM_REUSE_ACCESS_TOKEN",
        "NOTIFICATIONS_EVENT",
        "PROFILE_DELETE_REQUIRED",
        "CORS_ALLOW_ORIGINS",
        "SUPABASE_SERVICE_ROLE_KEY",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon")

    s = Settings.from_env()
    assert s.supabase_disabled is False
    assert s.fcm_reuse_access_token is True
    assert s.notifications_event == "*"
    assert s.notifications_table == "notifications"
    assert s.profile_delete_required is False
    assert s.cors_allow_origins == ("*",)
    assert s.worker_key == "anon"


def test_overrides(monkeypatch):
    monkeypatch.setenv("SUPABASE_DISABLED", "1")
    monkeypatch.setenv("FCM_REUSE_ACCESS_TOKEN", "0")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://a.example, https://b.example")
    monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "service")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon")

    s = Settings.from_env()
    assert s.supabase_disabled is True
    assert s.fcm_reuse_access_token is False
    assert s.cors_allow_origins == ("https://a.example", "https://b.example")
    assert s.worker_key == "service"
