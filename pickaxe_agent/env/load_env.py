import os
from typing import Callable, Dict, Mapping, TypeVar, Union

from dotenv import dotenv_values
from pydantic import BaseModel

from .env import Env

T = TypeVar("T", bound=BaseModel)

PrimaryType = Union[str, int, bool, float, bytes]
Coercer = Callable[[str], PrimaryType]


def _coerce(
    raw_values: Mapping[str, str | None],
    types: Dict[str, Coercer],
    source: str,
) -> Dict[str, PrimaryType]:
    values: Dict[str, PrimaryType] = {}

    for envar_name, envar_type in types.items():
        raw_value = raw_values.get(envar_name)
        if raw_value is None or raw_value == "":
            continue

        try:
            values[envar_name] = envar_type(raw_value)

        except ValueError as err:
            raise ValueError(
                f"Invalid value for {envar_name} in {source}: {raw_value!r}"
            ) from err

    return values


def load_env(
    default: type[Env],
    env_file: str | None = None,
    override: T | None = None,
) -> T:
    """
    Build settings from, in increasing precedence: the process environment,
    the dotenv ``env_file`` (``.env`` by default) and the fields explicitly
    set on ``override``.
    """
    types = default.types_map()

    if env_file is None:
        env_file = ".env"

    values = _coerce(os.environ, types, "environment")

    if env_file and os.path.exists(env_file):
        values.update(
            _coerce(dotenv_values(dotenv_path=env_file), types, env_file)
        )

    if override is None:
        return default(**values)

    values.update(override.model_dump(exclude_none=True, exclude_unset=True))

    return type(override)(**values)
