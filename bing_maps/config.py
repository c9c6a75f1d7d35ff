import os

from dynaconf import Dynaconf, Validator

# BING_MAPS_API_KEY is read from the environment (or .env) without a prefix.
# A missing key is left empty; the routing service answers 401.
settings = Dynaconf(
    envvar_prefix=False,
    settings_files=[
        os.path.join(os.path.dirname(__file__), "settings.json"),
    ],
    load_dotenv=True,
    merge_enabled=True,
    validators=[
        Validator(
            "bing_maps.api_url", default="http://dev.virtualearth.net/REST/v1"
        ),
        Validator("bing_maps.timeout", default=10.0, is_type_of=(int, float)),
        Validator("bing_maps_api_key", default="", cast=str),
        Validator("log_level", default="INFO"),
    ],
)
