import pytest

from lineasm.instructions import define_instruction


def _mov(instr, vm):
    value, reg = instr.operands
    vm.heap[reg] = int(value, 0)


def _add(instr, vm):
    src, dest = instr.operands
    vm.heap[dest] = vm.heap.get(dest, 0) + vm.heap.get(src, 0)


def _jmp(instr, vm):
    return vm.jump(instr.operands[0]) is None


@pytest.fixture
def toy_instructions():
    return [
        define_instruction("mov", ["imm", "reg"], executor=_mov),
        define_instruction("add", ["reg", "reg"], executor=_add),
        define_instruction("jmp", ["label"], executor=_jmp),
    ]
