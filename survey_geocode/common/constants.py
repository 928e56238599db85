"""Application constants."""

USER_AGENT = "survey-geocode/0.1 (+batch enrichment)"
DEFAULT_CONFIG_PATH = "config/geocode.yml"
API_KEY_ENV_VARS = ("GOOGLE_MAPS_API_KEY", "REACT_APP_GOOGLE_MAPS_API_KEY")
BASE_URL_ENV_VAR = "GEOCODE_BASE_URL"
REQUEST_DELAY_ENV_VAR = "GEOCODE_REQUEST_DELAY"
ADDRESS_FIELDS = ("physical_address", "town", "city", "country")
PACING_STRATEGIES = ("fixed", "token_bucket")
EXIT_SUCCESS = 0
EXIT_HARD_FAIL = 20
JSON_LOG_FIELDS = (
    "timestamp",
    "level",
    "run_id",
    "stage",
    "file",
    "record_id",
    "event",
    "status",
    "error_code",
    "geocoded",
    "skipped",
    "total",
    "message",
)
DEFAULT_CONFIG = {
    "provider": {
        "base_url": "https://maps.googleapis.com/maps/api",
        "api_key_env": "GOOGLE_MAPS_API_KEY",
        "timeout": {"connect": 10.0, "read": 30.0},
        "max_attempts": 1,
    },
    "pacing": {
        "strategy": "fixed",
        "delay_seconds": 0.1,
        "rate_per_sec": 10.0,
        "pace_skipped": True,
    },
    "validation": {"address": "Lagos, Nigeria"},
    "data": {
        "dir": "public/sample-data",
        "files": [
            "church-survey-responses.json",
            "institution-survey-responses.json",
            "non-formal-survey-responses.json",
        ],
        "backup_marker": "backup",
    },
}
