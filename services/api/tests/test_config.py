from app.core.config import Settings
from app.core.otel import init_otel
from fastapi import FastAPI


def test_cors_origins_formats():
    assert Settings(CORS_ORIGINS='["http://a.test", "http://b.test"]').cors_origins == [
        "http://a.test",
        "http://b.test",
    ]
    assert Settings(CORS_ORIGINS="[http://a.test, http://b.test]").cors_origins == [
        "http://a.test",
        "http://b.test",
    ]
    assert Settings(CORS_ORIGINS="http://a.test, http://b.test").cors_origins == [
        "http://a.test",
        "http://b.test",
    ]
    assert Settings(CORS_ORIGINS="*").cors_origins == ["*"]


def test_api_prefix_is_normalized():
    assert Settings(API_PREFIX="api/").api_prefix == "/api"
    assert Settings(API_PREFIX="/v2").api_prefix == "/v2"
    assert Settings(API_PREFIX="").api_prefix == ""


def test_defaults_match_storage_contract():
    s = Settings()
    assert s.blob_list_limit == 100
    assert s.bcrypt_rounds == 10


def test_tracing_is_off_by_default():
    assert init_otel(FastAPI()) is False
