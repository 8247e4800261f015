from virtual_agent.core.config import Settings


def test_cors_defaults_to_local_widget_origin():
    settings = Settings(frontend_origin=None, additional_origins=[])

    assert settings.cors_origins == ["http://localhost:5173"]


def test_cors_origins_are_trimmed_and_deduplicated():
    settings = Settings(
        frontend_origin="https://agent.example.com/",
        additional_origins=["https://admin.example.com", "https://agent.example.com"],
    )

    assert settings.cors_origins == ["https://agent.example.com", "https://admin.example.com"]


def test_session_limits_are_configurable():
    settings = Settings(max_sessions=5, session_idle_ttl_seconds=None)

    assert settings.max_sessions == 5
    assert settings.session_idle_ttl_seconds is None
