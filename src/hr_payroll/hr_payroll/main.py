from __future__ import annotations

import importlib
from pathlib import Path

from dotenv import load_dotenv

from config import get_settings_module

from .common.logging import configure_logging, get_logger
from .container import Container, build_container
from .core.rules import build_rules
from .database.bootstrap import apply_schema, list_tables

logger = get_logger(__name__)


def create_container() -> Container:
    """Load settings, configure logging and wire every service."""
    load_dotenv(override=False)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(str(getattr(settings, "LOG_LEVEL", "INFO")))

    db_config = dict(getattr(settings, "DB_CONFIG"))
    rules = build_rules(settings)

    logger.debug(
        "settings_loaded",
        settings=settings_module,
        db=f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}",
        timezone=rules.timezone,
        late_deduction_mode=rules.payroll.late_deduction_mode.value,
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
        apply_schema(db_config, schema_path=schema_path)
        logger.info("schema_ready", tables=len(list_tables(db_config)))

    return build_container(db_config=db_config, rules=rules)
