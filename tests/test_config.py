import pytest
from pydantic import ValidationError

from face_gate.core.config import (
    CORSSettings,
    DatabaseSettings,
    LoggingSettings,
    Settings,
    VerificationSettings,
)
from face_gate.pipelines.policy import PolicyThresholds


def test_verification_defaults(monkeypatch):
    for var in ("VERIFY_TARGET_IDENTITY", "VERIFY_MIN_REFERENCE_COUNT", "VERIFY_MATCH_THRESHOLD",
                "VERIFY_BEST_SIM_MIN_MULTI", "VERIFY_BEST_SIM_MIN_SINGLE"):
        monkeypatch.delenv(var, raising=False)
    config = VerificationSettings()
    assert config.target_identity == "Vishmish"
    assert PolicyThresholds.from_settings(config) == PolicyThresholds()


def test_verification_from_environment(monkeypatch):
    monkeypatch.setenv("VERIFY_TARGET_IDENTITY", "Alice")
    monkeypatch.setenv("VERIFY_MATCH_THRESHOLD", "0.8")
    monkeypatch.setenv("VERIFY_MIN_REFERENCE_COUNT", "3")
    config = VerificationSettings()
    assert config.target_identity == "Alice"
    assert config.match_threshold == 0.8
    assert config.min_reference_count == 3


@pytest.mark.parametrize("kwargs", [
    {"match_threshold": 1.2},
    {"best_sim_min_single": -1.5},
    {"min_reference_count": 0},
    {"target_identity": ""},
])
def test_verification_rejects_bad_values(kwargs):
    with pytest.raises(ValidationError):
        VerificationSettings(**kwargs)


def test_database_env_aliases(monkeypatch):
    monkeypatch.setenv("USE_DATABASE", "true")
    monkeypatch.setenv("DB_TABLE_NAME", "public.faces")
    monkeypatch.setenv("REFERENCES_FILE", "")
    config = DatabaseSettings()
    assert config.use_database is True
    assert config.table_name == "public.faces"
    assert config.references_file is None


def test_database_pool_bounds():
    with pytest.raises(ValidationError):
        DatabaseSettings(pool_min_conn=5, pool_max_conn=2)


def test_cors_origins_parsing():
    assert CORSSettings(cors_origins="*").origins == ["*"]
    assert CORSSettings(cors_origins="http://a.test, http://b.test,").origins == ["http://a.test", "http://b.test"]


def test_log_level_normalized():
    assert LoggingSettings(log_level="debug").log_level == "DEBUG"


def test_settings_combines_sections():
    settings = Settings(verification=VerificationSettings(target_identity="Bob"))
    assert settings.target_identity == "Bob"
    assert settings.use_database is settings.database.use_database
