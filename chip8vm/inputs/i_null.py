#!/usr/bin/env python3

"""
Null Input Plugin

Serves as a base class for other Input plugins.  Can be used on its own if zero
input functionality is required.

Every plugin keeps its own snapshot of the 16 hexadecimal keypad keys in
'key_states', updating it from whatever the host provides (key events, or
characters from a terminal).  The driver takes a copy of that snapshot before
every machine step, so a plugin never has to be asked about keys one at a time.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from ..constants import NUM_KEYS


class InputsError(Exception):
    pass


def host_lower(code):
    # Only plain ASCII is folded, as some Unicode capitals lower to more than one character
    if code < 0x80:
        return ord(chr(code).lower())

    return code


def parse_keymap(keymap, force_lowercase=False):
    """
    Turns a comma-separated string of 16 decimal host key codes into a
    dictionary of {host key code: keypad key}.  The first code maps to keypad
    key 0x0, and the last to 0xF.
    """
    codes = keymap.split(",")

    if len(codes) != NUM_KEYS:
        raise InputsError("Incorrect number of keys defined -- 16 required.  Use commas to split numbers")

    try:
        codes = [int(code) for code in codes]
    except ValueError:
        raise InputsError("Defined keys are not all integer values") from None

    if force_lowercase:
        # Characters (rather than keyscan codes) are matched case-insensitively
        codes = [host_lower(code) for code in codes]

    if len(set(codes)) != NUM_KEYS:
        raise InputsError("Duplicate keys defined")

    return {code: hex_key for hex_key, code in enumerate(codes)}


class Inputs:
    def __init__(self, keymap, renderer, force_lowercase=False):
        self.renderer = renderer
        self.keymap_dict = parse_keymap(keymap, force_lowercase)
        self.key_states = [False] * NUM_KEYS

    def process_messages(self):
        return False  # Don't exit the program

    def get_key_states(self):
        return list(self.key_states)

    def release_all(self):
        self.key_states = [False] * NUM_KEYS

    def shutdown(self):
        pass
