"""Identity result types.

Simple data classes returned by the identity service. None of them ever
carries a password or a password hash.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class OperationResult:
    """Success marker for operations that return no data."""

    success: bool = True


@dataclass(frozen=True)
class NicknameChanged:
    """Result of a nickname change.

    Attributes
    ----------
    nickname
        The nickname now held by the user
    """

    nickname: str
