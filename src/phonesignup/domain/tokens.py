"""
Secret and token generation.

All values are drawn from the ``secrets`` module. The human-readable
alphabet leaves out characters that are easily confused with each other
(0/O, 1/l/I, h/n, u/v and friends).
"""

import secrets

HUMAN_READABLE = "abcdefgijkmnopqrstwxyzABCDEFGHJKLMNPQRSTWXYZ23456789"

CONFIRMATION_TOKEN_LENGTH = 6
CLIENT_SECRET_LENGTH = 32
DEVICE_TOKEN_GROUPS = 5
DEVICE_TOKEN_GROUP_LENGTH = 5


def generate(length: int, alphabet: str = HUMAN_READABLE) -> str:
    return "".join(secrets.choice(alphabet) for _ in range(length))


def generate_confirmation_token() -> str:
    """Short token that can be typed back from an SMS."""
    return generate(CONFIRMATION_TOKEN_LENGTH)


def generate_client_secret() -> str:
    return generate(CLIENT_SECRET_LENGTH)


def generate_device_token() -> str:
    """
    Return a 25 character device password in five hyphenated groups.

    Example: AbCdE-fGjiK-kMnop-QrStW-23456
    """
    return "-".join(generate(DEVICE_TOKEN_GROUP_LENGTH) for _ in range(DEVICE_TOKEN_GROUPS))
