from .loader import ConfigError, LcatConfig, load_config_from_path

__all__ = ["ConfigError", "LcatConfig", "load_config_from_path"]
