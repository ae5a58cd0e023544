"""CHIP-8 instruction families, one module per leading nibble group."""
