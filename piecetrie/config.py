from __future__ import annotations

from typing import NamedTuple

from dynaconf import Dynaconf, Validator  # type: ignore[reportMissingTypeStubs]


class Wildcards(NamedTuple):
    any_one: str
    any_sequence: str


def valid_wildcard(piece: object) -> bool:
    """Validate a wildcard piece read from configuration.

    Configured wildcards are pieces of ``str`` keys, so each must be exactly one character:
    >>> valid_wildcard("?"), valid_wildcard("**")
    (True, False)
    """
    return isinstance(piece, str) and len(piece) == 1


config = Dynaconf(
    envvar_prefix="PIECETRIE",
    settings_files=["piecetrie.toml"],
    validators=[
        Validator("any_one", default="?", is_type_of=str, condition=valid_wildcard),
        Validator("any_sequence", default="*", is_type_of=str, condition=valid_wildcard),
    ],
)


config.validators.validate()  # type: ignore[reportUnknownMemberType]


def get_wildcards() -> Wildcards:
    any_one = str(config.any_one)  # type: ignore[reportUnknownMemberType]
    any_sequence = str(config.any_sequence)  # type: ignore[reportUnknownMemberType]

    if not (valid_wildcard(any_one) and valid_wildcard(any_sequence)):
        msg = "Wildcards must be single characters. Please check your piecetrie.toml file or PIECETRIE_* variables."
        raise RuntimeError(msg) from None

    if any_one == any_sequence:
        msg = f"any_one and any_sequence must differ, both are configured as {any_one!r}."
        raise RuntimeError(msg) from None

    return Wildcards(any_one, any_sequence)
