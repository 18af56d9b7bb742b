import os
from typing import Any
from ruamel.yaml import YAML
from retention.models import RetentionConfig
from retention.utils.yaml_loader import get_yaml_instance

CREDENTIAL_ENV_VARS = {
    "username": "NEXUS_USERNAME",
    "password": "NEXUS_PASSWORD",
}


class ConfigRepository:
    def __init__(self, file_path: str):
        self.file_path: str = file_path
        self.yaml: YAML = get_yaml_instance()

    def load(self) -> RetentionConfig:
        if not os.path.isfile(self.file_path):
            raise ValueError(f"Config file {self.file_path} not found")
        with open(self.file_path, "r") as f:
            data = self.yaml.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Invalid config file {self.file_path}: expected a mapping")
        try:
            return RetentionConfig(**self._apply_env_overrides(data))
        except Exception as e:
            raise ValueError(f"Invalid config file {self.file_path}: {e}") from e

    def _apply_env_overrides(self, data: dict[str, Any]) -> dict[str, Any]:
        nexus = dict(data.get("nexus") or {})
        for key, env_var in CREDENTIAL_ENV_VARS.items():
            value = os.environ.get(env_var)
            if value:
                nexus[key] = value
        return {**data, "nexus": nexus}
