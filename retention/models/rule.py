import re
from typing import Annotated
from pydantic import PositiveInt, StringConstraints
from pydantic.dataclasses import dataclass

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
# credentials are sent exactly as configured, surrounding spaces included
CredentialStr = Annotated[str, StringConstraints(min_length=1)]


@dataclass(frozen=True)
class Rule:
    name: NonEmptyStr
    regex: re.Pattern
    keep: PositiveInt

    def matches(self, image_name: str) -> bool:
        return self.regex.search(image_name) is not None
