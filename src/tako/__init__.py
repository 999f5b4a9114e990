"""Tako - command-line tool for developing TAKO smart contracts.

Scaffolds, builds, tests and inspects contracts targeting the TBPF
instruction set using the TOS platform-tools toolchain.
"""

__version__ = "0.1.0"
