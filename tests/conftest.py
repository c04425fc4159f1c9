import random
import struct

import pytest

from chip8vm import Chip8


def program(*words):
    """Pack 16-bit opcodes big-endian, the way they sit in a ROM."""
    return struct.pack(f">{len(words)}H", *words)


@pytest.fixture
def vm():
    return Chip8(rng=random.Random(1234))


@pytest.fixture
def load(vm):
    def _load(*words):
        vm.load(program(*words))
        return vm
    return _load
