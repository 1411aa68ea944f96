"""Application settings loaded from YAML."""

import logging
import os
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "STUDENT_HOUSING_CONFIG"
DEFAULT_CONFIG_PATH = os.path.join(
    os.path.dirname(__file__), "../../../config/settings.yaml"
)


class Settings(BaseModel):
    """Runtime settings"""

    storage_path: str = Field(default="data/app_data.json", description="State document")
    export_dir: str = Field(default="exports", description="Spreadsheet output directory")
    apartment_rent: float = Field(default=1700, ge=0)
    suite_rent: float = Field(default=3000, ge=0)
    academic_term: str = Field(
        default="الفصل الدراسي الأول لعام 1447هـ", description="Term named in claims"
    )
    whatsapp_country_code: str = Field(default="966", pattern=r"^\d{1,4}$")
    log_level: str = Field(default="INFO")


def load_settings(path: Optional[str] = None) -> Settings:
    """
    Load settings.

    The path is ``path``, else ``$STUDENT_HOUSING_CONFIG``, else
    ``config/settings.yaml`` at the project root. A missing or unreadable
    file yields the defaults.
    """
    config_path = path or os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH
    if not os.path.exists(config_path):
        logger.info("No settings file at %s, using defaults", config_path)
        return Settings()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Could not read settings %s: %s", config_path, e)
        return Settings()
    if not isinstance(config, dict):
        return Settings()

    try:
        return Settings.model_validate(config)
    except ValidationError as e:
        logger.warning("Invalid settings in %s: %s", config_path, e)
        return Settings()
