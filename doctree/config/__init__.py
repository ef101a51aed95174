# pyright: reportUnusedImport=false
# flake8: noqa

from .config import (
    Settings,
    TabsSettings,
    LoggingSettings,
    serialize_settings,
    export_settings,
    create_default_config_file,
    load_settings,
    configure_logging,
)
