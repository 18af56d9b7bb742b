from pydantic.dataclasses import dataclass

DOCKER_FORMAT = "docker"
HOSTED_TYPE = "hosted"

@dataclass(frozen=True)
class Repository:
    name: str
    format: str
    type: str

    def is_docker_hosted(self) -> bool:
        return self.format == DOCKER_FORMAT and self.type == HOSTED_TYPE
