"""Tests for fetch, step and program loading."""

import jax.numpy as jnp
import pytest
from octet import (
    fetch, step, load_program, load_rom, RomTooLarge,
    MAX_PROGRAM_SIZE, PROGRAM_START, STACK_OK, STACK_UNDERFLOW, STACK_OVERFLOW
)
from octet.constants import FONT_DATA
from conftest import program


def test_initial_state(fresh_state):
    assert fresh_state.pc == PROGRAM_START
    assert fresh_state.I == 0
    assert fresh_state.stack.pointer == 0
    assert not fresh_state.display.any()
    assert [int(b) for b in fresh_state.memory[:len(FONT_DATA)]] == FONT_DATA
    assert not fresh_state.memory[len(FONT_DATA):].any()


def test_fetch_is_big_endian(fresh_state):
    state = load_program(fresh_state, bytes([0x12, 0x34]))
    state, instruction = fetch(state)
    assert instruction == 0x1234
    assert state.pc == PROGRAM_START + 2


def test_fetch_wraps_at_end_of_memory(fresh_state):
    state = fresh_state.replace(
        memory=fresh_state.memory.at[0xFFF].set(0xAB),
        pc=jnp.astype(0xFFF, jnp.uint16),
    )
    _, instruction = fetch(state)
    assert instruction == (0xAB << 8) | FONT_DATA[0]


def test_step_advances_pc(fresh_state):
    state = load_program(fresh_state, program(0x6A07, 0x7A01))
    state = step(state)
    assert state.pc == 0x202
    state = step(state)
    assert state.pc == 0x204
    assert state.V[0xA] == 8


def test_step_skip_adds_four(fresh_state):
    state = load_program(fresh_state, program(0x3000, 0x6101, 0x6202))
    state = step(state)
    assert state.pc == 0x204
    state = step(state)
    assert state.V[1] == 0
    assert state.V[2] == 2


def test_unknown_opcode_is_not_fatal(fresh_state):
    state = load_program(fresh_state, program(0x8AB9, 0x6105))
    state = step(state)
    assert state.unknown_opcode
    assert state.stack_fault == STACK_OK
    assert state.pc == 0x202

    state = step(state)
    assert not state.unknown_opcode
    assert state.V[1] == 5


def test_return_underflow_rolls_back(fresh_state):
    state = load_program(fresh_state, program(0x00EE))
    state = step(state)
    assert state.stack_fault == STACK_UNDERFLOW
    assert state.pc == PROGRAM_START
    assert state.stack.pointer == 0


def test_call_overflow_rolls_back(fresh_state):
    state = load_program(fresh_state, program(0x2200))  # calls itself forever
    for _ in range(16):
        state = step(state)
        assert state.stack_fault == STACK_OK
    before = state

    state = step(state)
    assert state.stack_fault == STACK_OVERFLOW
    assert state.pc == before.pc
    assert state.stack.pointer == 16
    assert jnp.array_equal(state.stack.data, before.stack.data)


def test_fault_flags_clear_on_next_step(fresh_state):
    state = load_program(fresh_state, program(0xFFFF, 0x0000))
    state = step(state)
    assert state.unknown_opcode
    state = step(state)
    assert not state.unknown_opcode


def test_self_loop(fresh_state):
    """CLS then a jump back to itself."""
    state = fresh_state.replace(display=fresh_state.display.at[5, 5].set(True))
    state = load_program(state, program(0x00E0, 0x1202))

    state = step(state)
    assert not state.display.any()
    state = step(state)
    assert state.pc == 0x202
    state = step(state)
    assert state.pc == 0x202


class TestLoadProgram:

    def test_load_at_program_start(self, fresh_state):
        state = load_program(fresh_state, bytes([1, 2, 3]))
        assert [int(b) for b in state.memory[0x200:0x203]] == [1, 2, 3]
        assert state.memory[0x203] == 0

    def test_load_largest_image(self, fresh_state):
        data = bytes(range(256)) * (MAX_PROGRAM_SIZE // 256)
        assert len(data) == MAX_PROGRAM_SIZE
        state = load_program(fresh_state, data)
        assert state.memory[0xFFF] == 0xFF

    def test_load_too_large(self, fresh_state):
        with pytest.raises(RomTooLarge) as excinfo:
            load_program(fresh_state, bytes(MAX_PROGRAM_SIZE + 1))
        assert excinfo.value.size == MAX_PROGRAM_SIZE + 1
        assert excinfo.value.limit == MAX_PROGRAM_SIZE

    def test_load_empty(self, fresh_state):
        assert load_program(fresh_state, b"") is fresh_state

    def test_load_rom_from_file(self, fresh_state, tmp_path):
        rom = tmp_path / "test.ch8"
        rom.write_bytes(program(0x00E0, 0x1200))
        state = load_rom(fresh_state, str(rom))
        assert [int(b) for b in state.memory[0x200:0x204]] == [0x00, 0xE0, 0x12, 0x00]

