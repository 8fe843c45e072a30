"""Configuration for favicon-finder"""

from pathlib import Path

from dynaconf import Dynaconf, Validator

# Validators for favicon-finder settings.
_validators = [
    Validator("logging.format", is_in=["mozlog", "pretty"]),
    Validator("logging.level", is_in=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    Validator("logging.can_propagate", is_type_of=bool),
    Validator("metrics.dev_logger", is_type_of=bool),
    Validator("metrics.host", is_type_of=str),
    Validator("metrics.port", gte=0, is_type_of=int),
    Validator("http.connect_timeout_sec", is_type_of=float, gt=0),
    Validator("http.request_timeout_sec", is_type_of=float, gt=0),
    Validator("http.pool_timeout_sec", is_type_of=float, gt=0),
    Validator("http.max_connections", is_type_of=int, gte=1),
    Validator("http.user_agent", is_type_of=str, must_exist=True),
    Validator(
        "search.preferred_strategy",
        is_in=["html", "ico", "webApplicationManifestFile"],
        must_exist=True,
    ),
    Validator("search.follow_meta_refresh_redirect", is_type_of=bool),
    Validator("search.fetch_image_bytes", is_type_of=bool),
    Validator("search.max_meta_refresh_hops", is_type_of=int, gte=1, lte=10),
    # Favicons are small; refuse to decode anything bigger than a few megabytes.
    Validator("image.max_size", is_type_of=int, gt=0, lte=10_485_760),
]

# `root_path` = The package directory, so settings load regardless of the working directory.
# `envvar_prefix` = Export envvars with `export FAVICON_FINDER_FOO=bar`.
# `settings_files` = Load these files in the order.
# `environments` = Enable layered environments such as `development`, `production`, `testing` etc.
# `env_switcher` = Switch environments by `export FAVICON_FINDER_ENV=production`.
#   Default: `development`.
# `validators` = Define validators for favicon-finder settings.

settings = Dynaconf(
    root_path=str(Path(__file__).resolve().parents[1]),
    envvar_prefix="FAVICON_FINDER",
    settings_files=[
        "configs/default.toml",
        "configs/development.toml",
        "configs/production.toml",
        "configs/testing.toml",
    ],
    environments=True,
    env_switcher="FAVICON_FINDER_ENV",
    validators=_validators,
)
