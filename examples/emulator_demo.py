#!/usr/bin/env python3
"""
MARIE Emulator Demo
===================

This script demonstrates how to use the MARIE SDK to:
1. Assemble a program and inspect its symbols and listing
2. Run it with scripted input
3. Single-step and watch the registers
4. Bound a runaway program with a step limit

Usage:
    python examples/emulator_demo.py
"""

from pathlib import Path

from marie_sdk import Assembler, Emulator, EmulatorConfig, ScriptedConsole, BreakReason

HERE = Path(__file__).parent


def main():
    # ==========================================================================
    # 1. Assemble
    # ==========================================================================
    asm = Assembler()
    image = asm.assemble_file(HERE / "subroutine.mas")

    print(f"Assembled {len(image)} words")
    for name, address in sorted(asm.get_symbols().items(), key=lambda s: s[1]):
        print(f"  {name:8s} {address:03X}")

    print()
    print(asm.get_listing())

    # ==========================================================================
    # 2. Run with scripted input (6 * 7)
    # ==========================================================================
    console = ScriptedConsole(["6", "7"])
    emu = Emulator(console=console)
    emu.load_image(image)

    event = emu.run()
    print(f"{event} after {event.steps} steps")
    print(f"Output: {console.output}")

    # ==========================================================================
    # 3. Single-step the first few instructions
    # ==========================================================================
    console.feed("3", "4")
    emu.reset()
    for _ in range(4):
        emu.step()
        print(emu.cpu.format_registers())

    # ==========================================================================
    # 4. Step limit
    # ==========================================================================
    emu = Emulator(EmulatorConfig(max_steps=1000), console=ScriptedConsole())
    emu.load_source("Top, Jump Top")
    event = emu.run()
    assert event.reason == BreakReason.MAX_STEPS
    print(f"\nRunaway program stopped: {event}")


if __name__ == "__main__":
    main()
