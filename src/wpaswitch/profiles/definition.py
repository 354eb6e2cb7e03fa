"""
Profile definitions on disk.
A profile is a file of shell-style assignments (Interface=wlan0, ESSID='Home',
Address=('10.0.0.2/24')). Only Interface, Connection, Security, ExcludeAuto and
TimeoutWPA are interpreted; other keys are accepted and ignored.
"""

import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Union

from wpaswitch.errors import InvalidProfile

DEFAULT_TIMEOUT_WPA = 15

TRUE_VALUES = {'yes', 'true', '1', 'on'}

Value = Union[str, List[str]]


@dataclass
class ProfileDefinition:
    name: str
    interface: Optional[str] = None
    connection: Optional[str] = None
    security: Optional[str] = None
    exclude_auto: bool = False
    timeout_wpa: int = DEFAULT_TIMEOUT_WPA


def _assignments(text: str) -> Dict[str, Value]:
    lexer = shlex.shlex(text, posix=True)
    lexer.whitespace_split = True
    lexer.commenters = '#'

    values: Dict[str, Value] = {}
    tokens = iter(lexer)
    for token in tokens:
        key, sep, value = token.partition('=')
        if not sep or not key.isidentifier():
            raise InvalidProfile(f"not an assignment: {token!r}")

        if value.startswith('('):
            # bash array, possibly spread over several tokens
            items = []
            value = value[1:]
            while not value.endswith(')'):
                if value:
                    items.append(value)
                try:
                    value = next(tokens)
                except StopIteration:
                    raise InvalidProfile(f"unterminated array for {key}") from None
            if value[:-1]:
                items.append(value[:-1])
            values[key] = items
        else:
            values[key] = value
    return values


def parse_profile(name: str, text: str) -> ProfileDefinition:
    """
    Parse the contents of one profile file.

    Args:
        name: Profile name (the file name)
        text: File contents

    Returns:
        ProfileDefinition with TimeoutWPA defaulting to 15 seconds

    Raises:
        InvalidProfile: If the text is not a list of assignments or
            TimeoutWPA is not a positive integer
    """
    try:
        values = _assignments(text)
    except ValueError as e:
        # shlex reports unbalanced quotes as ValueError
        raise InvalidProfile(f"{name}: {e}") from e

    def scalar(key: str) -> Optional[str]:
        value = values.pop(key, None)
        if isinstance(value, list):
            return ' '.join(value)
        return value

    timeout = scalar('TimeoutWPA')
    if timeout is None or timeout == '':
        timeout_wpa = DEFAULT_TIMEOUT_WPA
    else:
        try:
            timeout_wpa = int(timeout)
        except ValueError:
            raise InvalidProfile(
                f"{name}: TimeoutWPA must be an integer, got {timeout!r}") from None
        if timeout_wpa <= 0:
            raise InvalidProfile(f"{name}: TimeoutWPA must be positive")

    exclude_auto = (scalar('ExcludeAuto') or '').lower() in TRUE_VALUES

    return ProfileDefinition(
        name=name,
        interface=scalar('Interface'),
        connection=scalar('Connection'),
        security=scalar('Security'),
        exclude_auto=exclude_auto,
        timeout_wpa=timeout_wpa,
    )


def load_profile(name: str, profile_dir: str) -> ProfileDefinition:
    """
    Load a profile definition by name.

    Raises:
        FileNotFoundError: If no such profile exists
        InvalidProfile: If the name is not a plain file name, or the file
            cannot be read, decoded or parsed
    """
    if not name or '/' in name or name.startswith('.'):
        raise InvalidProfile(f"invalid profile name: {name!r}")
    path = Path(profile_dir) / name
    try:
        text = path.read_text(encoding='utf-8')
    except FileNotFoundError:
        raise
    except (OSError, UnicodeDecodeError) as e:
        raise InvalidProfile(f"{name}: cannot read {path}: {e}") from e
    return parse_profile(name, text)
